# The MIT License (MIT)
#
# Copyright (c) Arie Bovenberg
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:
#
# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.
#
# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

# Maintainer's notes:
#
# - Why is everything in one file?
#   - Flat is better than nested
#   - It prevents circular imports since the classes 'know' about each other
#   - It's easier to vendor (i.e. copy-paste) this library if needed
# - None of the calendar maths goes through the standard library's
#   datetime or calendar modules. Everything is integer division on a day
#   count anchored at 1 March 2000, see Date.from_days_since_epoch.
# - Leap seconds are ignored everywhere.
from __future__ import annotations

__version__ = "0.1.0"

from enum import IntEnum
from operator import attrgetter, index
from time import time_ns as _time_ns
from typing import (
    TYPE_CHECKING,
    Callable,
    ClassVar,
    Literal,
    NamedTuple,
    Optional,
    Tuple,
    no_type_check,
    overload,
)

__all__ = [
    "Date",
    "Time",
    "DateTime",
    "Instant",
    "Duration",
    "Month",
    "Weekday",
    "Year",
    "OutOfRange",
    "Clock",
    "system_clock",
    "split_cycles",
    "hours",
    "minutes",
    "seconds",
]


#: Number of days in four years, one of them a leap year.
DAYS_IN_4Y = 365 * 4 + 1

#: Number of days in a hundred years, 24 of them leap years.
DAYS_IN_100Y = 365 * 100 + 24

#: Number of days in four hundred years, 97 of them leap years.
DAYS_IN_400Y = 365 * 400 + 97

SECONDS_IN_DAY = 86_400

#: Days between 1 January 1970 (the epoch of :class:`Instant`) and
#: 1 March 2000 (day zero of the calendar maths).
#:
#: 1 March 2000 comes right after the leap day closing a 400-year Gregorian
#: cycle, so the leap rules reduce to a few nested divisions.
EPOCH_DIFFERENCE = (
    30 * 365  # 1970 through 1999
    + 7  # leap days in 1972..1996
    + 31  # January 2000
    + 29  # February 2000
)

# Days elapsed at the end of each month of a March-based year, going
# backwards from January to March. February is absent: anything past the
# January entry falls in it.
_TIME_TRIANGLE = (
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30 + 31 + 31,  # January
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30 + 31,  # December
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31 + 30,  # November
    31 + 30 + 31 + 30 + 31 + 31 + 30 + 31,  # October
    31 + 30 + 31 + 30 + 31 + 31 + 30,  # September
    31 + 30 + 31 + 30 + 31 + 31,  # August
    31 + 30 + 31 + 30 + 31,  # July
    31 + 30 + 31 + 30,  # June
    31 + 30 + 31,  # May
    31 + 30,  # April
    31,  # March
)

_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_DAYS_BEFORE_MONTH = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


def split_cycles(number_of_periods: int, cycle_length: int) -> tuple[int, int]:
    """Split a number of periods into whole cycles and a leftover.

    The leftover is always in ``[0, cycle_length)``, also for negative
    input: ``-1`` day is cycle ``-1`` with ``cycle_length - 1`` days left.

    Example
    -------

    >>> split_cycles(10, 7)
    (1, 3)
    >>> split_cycles(-10, 7)
    (-2, 4)

    """
    return divmod(number_of_periods, cycle_length)


class OutOfRange(ValueError):
    """A date or time field is out of range"""

    @staticmethod
    def for_day_of_month(year: int, month: int, day: int) -> OutOfRange:
        return OutOfRange(
            f"day {day} is out of range for month {month} of year {year}"
        )

    @staticmethod
    def for_day_of_year(year: int, day_of_year: int) -> OutOfRange:
        return OutOfRange(
            f"day of year {day_of_year} is out of range for year {year}"
        )

    @staticmethod
    def for_field(name: str, value: int) -> OutOfRange:
        return OutOfRange(f"{name} {value} is out of range")

    @staticmethod
    def for_time(
        hour: int, minute: int, second: int, millisecond: int
    ) -> OutOfRange:
        return OutOfRange(
            f"time {hour}:{minute}:{second}.{millisecond} is out of range"
        )


class Month(IntEnum):
    """A month of the year, where 1 is January and 12 is December"""

    JANUARY = 1
    FEBRUARY = 2
    MARCH = 3
    APRIL = 4
    MAY = 5
    JUNE = 6
    JULY = 7
    AUGUST = 8
    SEPTEMBER = 9
    OCTOBER = 10
    NOVEMBER = 11
    DECEMBER = 12

    def days_in_month(self, is_leap_year: bool) -> int:
        """The number of days in this month

        Example
        -------

        >>> Month.FEBRUARY.days_in_month(is_leap_year=True)
        29

        """
        if self is Month.FEBRUARY and is_leap_year:
            return 29
        return _DAYS_IN_MONTH[self - 1]

    def days_before_start(self) -> int:
        """The number of days in all earlier months of a non-leap year"""
        return _DAYS_BEFORE_MONTH[self - 1]

    def months_from_january(self) -> int:
        return self - 1

    @classmethod
    def from_zero(cls, month: int) -> Optional[Month]:
        """The month for a zero-based index, or ``None`` if there is none

        Example
        -------

        >>> Month.from_zero(0)
        <Month.JANUARY: 1>
        >>> Month.from_zero(12) is None
        True

        """
        if 0 <= month < 12:
            return cls(month + 1)
        return None


class Weekday(IntEnum):
    """A day of the week, where 1 is Monday and 7 is Sunday (as in ISO 8601)"""

    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    def days_from_monday_as_one(self) -> int:
        return self.value

    @classmethod
    def from_zero(cls, weekday: int) -> Optional[Weekday]:
        """The weekday for a zero-based index counted from Sunday,
        or ``None`` if there is none

        Example
        -------

        >>> Weekday.from_zero(0)
        <Weekday.SUNDAY: 7>
        >>> Weekday.from_zero(3)
        <Weekday.WEDNESDAY: 3>

        """
        if 0 <= weekday < 7:
            return cls(weekday or 7)
        return None


MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = Weekday


class Year:
    """A year of the proleptic Gregorian calendar

    Example
    -------

    >>> Year(2000).is_leap_year()
    True
    >>> Year(1900).is_leap_year()
    False

    """

    __slots__ = ("_year",)

    def __init__(self, year: int) -> None:
        self._year = year

    def is_leap_year(self) -> bool:
        y = self._year
        return y % 4 == 0 and (y % 100 != 0 or y % 400 == 0)

    def days_in_year(self) -> int:
        return 366 if self.is_leap_year() else 365

    def leap_year_calculations(self) -> tuple[int, bool]:
        """The number of leap years from 2001 up to (not including) this
        year, negative for years before 2001, and whether this year is a
        leap year.

        Both come out of the same cycle split, which is why they're
        returned together.

        Example
        -------

        >>> Year(2005).leap_year_calculations()
        (1, False)
        >>> Year(2004).leap_year_calculations()
        (0, True)

        """
        num_400y_cycles, remainder = split_cycles(self._year - 2000, 400)
        is_leap_year = remainder == 0 or (
            remainder % 100 != 0 and remainder % 4 == 0
        )
        num_100y_cycles, remainder = divmod(remainder, 100)
        leap_days_elapsed = (
            remainder // 4
            + 97 * num_400y_cycles
            + 24 * num_100y_cycles
            - is_leap_year
        )
        return leap_days_elapsed, is_leap_year

    def __repr__(self) -> str:
        return f"Year({self._year})"


class _YMD(NamedTuple):
    # Deliberately unchecked: the 74th of March is a fine _YMD.
    # Date only ever holds one after it passed to_days_since_epoch().
    year: int
    month: Month
    day: int

    def is_valid(self, is_leap_year: bool) -> bool:
        return 1 <= self.day <= self.month.days_in_month(is_leap_year)

    def to_days_since_epoch(self) -> int:
        """Days since 1 January 1970.

        Raises
        ------
        OutOfRange
            If the day doesn't exist in the month
        """
        leap_days_elapsed, is_leap_year = Year(
            self.year
        ).leap_year_calculations()
        if not self.is_valid(is_leap_year):
            raise OutOfRange.for_day_of_month(
                self.year, int(self.month), self.day
            )
        return (
            (self.year - 2000) * 365
            + 10958  # up to 1 January 2000, plus the leap day of 2000
            + leap_days_elapsed
            + self.month.days_before_start()
            + (is_leap_year and self.month >= Month.MARCH)
            + self.day
            - 1
        )


def _days_to_weekday(days: int) -> Weekday:
    # 1 March 2000 was a Wednesday
    return Weekday.from_zero((days + 3) % 7)  # type: ignore[return-value]


def _as_month(month: int) -> Month:
    if month not in range(1, 13):
        raise OutOfRange.for_field("month", month)
    return Month(month)


def _as_weekday(weekday: int) -> Weekday:
    if weekday not in range(1, 8):
        raise OutOfRange.for_field("weekday", weekday)
    return Weekday(weekday)


class Date:
    """A date without a time component

    Example
    -------

    >>> Date(2021, 1, 2)
    Date(2021-01-02)

    """

    __slots__ = ("_ymd", "_yearday", "_weekday")

    def __init__(self, year: int, month: int, day: int) -> None:
        days = _YMD(
            index(year), _as_month(month), index(day)
        ).to_days_since_epoch()
        other = Date.from_days_since_epoch(days - EPOCH_DIFFERENCE)
        self._ymd = other._ymd
        self._yearday = other._yearday
        self._weekday = other._weekday

    @classmethod
    def ymd(cls, year: int, month: int, day: int, /) -> Date:
        """Create from year, month and day. Same as the constructor.

        Example
        -------

        >>> Date.ymd(1969, Month.JULY, 20)
        Date(1969-07-20)
        >>> Date.ymd(2100, Month.FEBRUARY, 29)
        Traceback (most recent call last):
          ...
        civiltime.OutOfRange: day 29 is out of range for month 2 of year 2100

        """
        return cls(year, month, day)

    @classmethod
    def yd(cls, year: int, day_of_year: int, /) -> Date:
        """Create from a year and a day of that year

        Example
        -------

        >>> Date.yd(2015, 256)
        Date(2015-09-13)
        >>> Date.yd(2016, 256)  # a leap year
        Date(2016-09-12)

        Note
        ----
        Day zero is accepted, and is the last day of the previous year.
        """
        if not 0 <= day_of_year < 367:
            raise OutOfRange.for_day_of_year(year, day_of_year)
        jan_1 = _YMD(year, Month.JANUARY, 1).to_days_since_epoch()
        return cls.from_days_since_epoch(
            jan_1 + day_of_year - 1 - EPOCH_DIFFERENCE
        )

    @classmethod
    def ywd(cls, year: int, week: int, weekday: int, /) -> Date:
        """Create from an ISO 8601 week date

        Example
        -------

        >>> Date.ywd(2015, 37, Weekday.FRIDAY)
        Date(2015-09-11)

        The calendar year may differ from the week-numbering year
        early in week 1 or late in week 53:

        >>> Date.ywd(2009, 1, Weekday.MONDAY)
        Date(2008-12-29)
        >>> Date.ywd(2009, 53, Weekday.SUNDAY)
        Date(2010-01-03)

        """
        weekday = _as_weekday(weekday)
        # week 1 is the week containing 4 January
        jan_4 = _YMD(year, Month.JANUARY, 4).to_days_since_epoch()
        correction = (
            _days_to_weekday(
                jan_4 - EPOCH_DIFFERENCE
            ).days_from_monday_as_one()
            + 3
        )
        yearday = 7 * week + weekday.days_from_monday_as_one() - correction

        if yearday <= 0:
            return cls.yd(year - 1, Year(year - 1).days_in_year() + yearday)
        days_in_year = Year(year).days_in_year()
        if yearday >= days_in_year:
            return cls.yd(year + 1, yearday - days_in_year)
        return cls.yd(year, yearday)

    @classmethod
    def from_days_since_epoch(cls, days: int, /) -> Date:
        """Create from the number of days since 1 March 2000.

        Inverse of :meth:`to_days_since_epoch`.

        Example
        -------

        >>> Date.from_days_since_epoch(0)
        Date(2000-03-01)
        >>> Date.from_days_since_epoch(-1)
        Date(2000-02-29)

        """
        # The Gregorian calendar repeats every 400 years. Find the number
        # of 400-, 100- and 4-year cycles and single years, whittling down
        # the remainder as we go. The last day of a 400-year cycle (and of
        # a 4-year cycle) is a leap day, which would otherwise spill over
        # into a fifth century (or year) of its own.
        num_400y_cycles, remainder = split_cycles(days, DAYS_IN_400Y)

        num_100y_cycles = min(remainder // DAYS_IN_100Y, 3)
        remainder -= num_100y_cycles * DAYS_IN_100Y

        num_4y_cycles = remainder // DAYS_IN_4Y
        remainder -= num_4y_cycles * DAYS_IN_4Y

        years = min(remainder // 365, 3)
        remainder -= years * 365  # days since 1 March of this year

        # Whether the calendar year holding this March is a leap year.
        # The counts are already at hand, so no need to divide again.
        days_this_year = (
            366
            if years == 0 and not (num_4y_cycles == 0 and num_100y_cycles)
            else 365
        )

        # 306 is the number of days from March through December
        day_of_year = remainder + days_this_year - 306
        if day_of_year >= days_this_year:
            day_of_year -= days_this_year  # January or February

        years += 4 * num_4y_cycles + 100 * num_100y_cycles
        years += 400 * num_400y_cycles

        # the triangle goes backwards, hence the "11 - index"
        for index, elapsed in enumerate(_TIME_TRIANGLE):
            if elapsed <= remainder:
                month, month_days = 11 - index, remainder - elapsed
                break
        else:
            month, month_days = 0, remainder

        # realign from March-based to January-based months
        month += 2
        if month >= 12:
            years += 1
            month -= 12

        return cls._from_fields_unchecked(
            years + 2000,
            Month.from_zero(month),  # type: ignore[arg-type]
            month_days + 1,
            _days_to_weekday(days),
            day_of_year + 1,
        )

    def to_days_since_epoch(self) -> int:
        """The number of days since 1 March 2000.

        Inverse of :meth:`from_days_since_epoch`.

        Example
        -------

        >>> Date(2000, 3, 2).to_days_since_epoch()
        1

        """
        return self._ymd.to_days_since_epoch() - EPOCH_DIFFERENCE

    @classmethod
    def _from_fields_unchecked(
        cls,
        year: int,
        month: Month,
        day: int,
        weekday: Weekday,
        yearday: int,
    ) -> Date:
        # No validation at all. Only for callers that derived every field
        # from the same day count.
        self = _object_new(cls)
        self._ymd = _YMD(year, month, day)
        self._weekday = weekday
        self._yearday = yearday
        return self

    @property
    def year(self) -> int:
        return self._ymd.year

    @property
    def month(self) -> Month:
        return self._ymd.month

    @property
    def day(self) -> int:
        return self._ymd.day

    @property
    def yearday(self) -> int:
        """The day of the year, where 1 is the 1st of January"""
        return self._yearday

    @property
    def weekday(self) -> Weekday:
        """The day of the week

        Example
        -------

        >>> Date(2021, 1, 2).weekday
        <Weekday.SATURDAY: 6>

        """
        return self._weekday

    def canonical_format(self) -> str:
        """The date in canonical format.

        Years outside 0 to 9999 get an explicit sign.

        Example
        -------

        >>> Date(2021, 1, 2).canonical_format()
        '2021-01-02'
        >>> Date(-753, 12, 1).canonical_format()
        '-0753-12-01'

        """
        year, month, day = self._ymd
        return (
            f"{year:04}" if 0 <= year <= 9999 else f"{year:+05}"
        ) + f"-{int(month):02}-{day:02}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"Date({self})"

    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Compare for equality. Only the year, month and day
            are compared.

            Example
            -------

            >>> Date(2021, 1, 2)
            >>> d == Date(2021, 1, 2)
            True
            >>> d == Date(2021, 1, 3)
            False

            """
            if not isinstance(other, Date):
                return NotImplemented
            return self._ymd == other._ymd

        __hash__ = property(attrgetter("_ymd.__hash__"))

    def __lt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd < other._ymd

    def __le__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd <= other._ymd

    def __gt__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd > other._ymd

    def __ge__(self, other: Date) -> bool:
        if not isinstance(other, Date):
            return NotImplemented
        return self._ymd >= other._ymd

    # We don't need to copy, because it's immutable
    def __copy__(self) -> Date:
        return self

    def __deepcopy__(self, _: object) -> Date:
        return self

    def __reduce__(self) -> tuple[object, ...]:
        year, month, day = self._ymd
        return (_unpkl_date, (year, int(month), day))


@no_type_check
def _unpkl_date(*args) -> Date:
    return Date(*args)


class Time:
    """A time of day without a date or timezone, with millisecond precision

    The constructor accepts hours 0 to 23. Use :meth:`hm` or :meth:`hms`
    for ``24:00:00``, the end of the day.

    Example
    -------

    >>> Time(12, 30)
    Time(12:30:00.000)

    """

    __slots__ = ("_hour", "_minute", "_second", "_millisecond")

    def __init__(
        self, hour: int, minute: int, second: int = 0, millisecond: int = 0
    ) -> None:
        hour, minute = index(hour), index(minute)
        second, millisecond = index(second), index(millisecond)
        if not (
            0 <= hour < 24
            and 0 <= minute < 60
            and 0 <= second < 60
            and 0 <= millisecond < 1000
        ):
            raise OutOfRange.for_time(hour, minute, second, millisecond)
        self._hour = hour
        self._minute = minute
        self._second = second
        self._millisecond = millisecond

    @classmethod
    def midnight(cls) -> Time:
        return cls._from_fields_unchecked(0, 0, 0, 0)

    @classmethod
    def hm(cls, hour: int, minute: int, /) -> Time:
        """Create from hour and minute, also accepting ``24:00``"""
        return cls.hms(hour, minute, 0)

    @classmethod
    def hms(cls, hour: int, minute: int, second: int, /) -> Time:
        """Create from hour, minute and second, also accepting ``24:00:00``

        Example
        -------

        >>> Time.hms(24, 0, 0)
        Time(24:00:00.000)
        >>> Time.hms(24, 0, 1)
        Traceback (most recent call last):
          ...
        civiltime.OutOfRange: time 24:0:1.0 is out of range

        """
        if hour == 24 and minute == 0 and second == 0:
            return cls._from_fields_unchecked(24, 0, 0, 0)
        return cls(hour, minute, second)

    @classmethod
    def hms_ms(
        cls, hour: int, minute: int, second: int, millisecond: int, /
    ) -> Time:
        """Create from all fields. Unlike :meth:`hms`, hour 24 is never
        accepted."""
        return cls(hour, minute, second, millisecond)

    @classmethod
    def from_seconds_since_midnight(cls, seconds: int, /) -> Time:
        return cls.from_seconds_and_milliseconds_since_midnight(seconds, 0)

    @classmethod
    def from_seconds_and_milliseconds_since_midnight(
        cls, seconds: int, millisecond: int, /
    ) -> Time:
        """Create from seconds since midnight and a millisecond of that
        second.

        Warning
        -------
        The values aren't checked. Seconds are expected in
        ``[0, 86400)`` and milliseconds in ``[0, 1000)``.
        """
        return cls._from_fields_unchecked(
            seconds // 3600, seconds // 60 % 60, seconds % 60, millisecond
        )

    @classmethod
    def _from_fields_unchecked(
        cls, hour: int, minute: int, second: int, millisecond: int
    ) -> Time:
        self = _object_new(cls)
        self._hour = hour
        self._minute = minute
        self._second = second
        self._millisecond = millisecond
        return self

    def to_seconds(self) -> int:
        """Seconds since midnight, ignoring milliseconds

        Example
        -------

        >>> Time(1, 2, 3, 400).to_seconds()
        3723

        """
        return self._hour * 3600 + self._minute * 60 + self._second

    @property
    def hour(self) -> int:
        return self._hour

    @property
    def minute(self) -> int:
        return self._minute

    @property
    def second(self) -> int:
        return self._second

    @property
    def millisecond(self) -> int:
        return self._millisecond

    def _as_tuple(self) -> tuple[int, int, int, int]:
        return (self._hour, self._minute, self._second, self._millisecond)

    def canonical_format(self) -> str:
        """The time in canonical format, ``HH:MM:SS.mmm``

        Example
        -------

        >>> Time(9, 5).canonical_format()
        '09:05:00.000'

        """
        return (
            f"{self._hour:02}:{self._minute:02}:{self._second:02}"
            f".{self._millisecond:03}"
        )

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"Time({self})"

    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            if not isinstance(other, Time):
                return NotImplemented
            return self._as_tuple() == other._as_tuple()

    def __hash__(self) -> int:
        return hash(self._as_tuple())

    def __lt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._as_tuple() < other._as_tuple()

    def __le__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._as_tuple() <= other._as_tuple()

    def __gt__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._as_tuple() > other._as_tuple()

    def __ge__(self, other: Time) -> bool:
        if not isinstance(other, Time):
            return NotImplemented
        return self._as_tuple() >= other._as_tuple()

    def __copy__(self) -> Time:
        return self

    def __deepcopy__(self, _: object) -> Time:
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return (_unpkl_time, self._as_tuple())


@no_type_check
def _unpkl_time(hour, minute, second, millisecond) -> Time:
    if millisecond:
        return Time.hms_ms(hour, minute, second, millisecond)
    return Time.hms(hour, minute, second)


class Duration:
    """A signed span of elapsed time, with millisecond precision

    The inputs are normalized, so 90 minutes becomes 1 hour and 30 minutes,
    for example.

    Examples
    --------

    >>> Duration(hours=1, minutes=30)
    Duration(01:30:00)
    >>> Duration(hours=1, minutes=30).in_seconds()
    5400.0

    """

    __slots__ = ("_total_ms",)

    def __init__(
        self,
        *,
        hours: float = 0,
        minutes: float = 0,
        seconds: float = 0,
        milliseconds: int = 0,
    ) -> None:
        assert type(milliseconds) is int  # catch this common mistake
        self._total_ms = (
            # Round individual components to avoid floating point errors
            round(hours * 3_600_000)
            + round(minutes * 60_000)
            + round(seconds * 1_000)
            + milliseconds
        )

    ZERO: ClassVar[Duration]
    """A duration of zero"""

    @classmethod
    def of(cls, seconds: int, /) -> Duration:
        """A duration of the given number of seconds"""
        return cls(milliseconds=seconds * 1_000)

    @classmethod
    def of_ms(cls, seconds: int, milliseconds: int, /) -> Duration:
        return cls(milliseconds=seconds * 1_000 + milliseconds)

    def in_seconds(self) -> float:
        """The total duration in seconds

        Example
        -------

        >>> Duration(minutes=2, seconds=1, milliseconds=500).in_seconds()
        121.5

        """
        return self._total_ms / 1_000

    def in_milliseconds(self) -> int:
        return self._total_ms

    def lengths(self) -> tuple[int, int]:
        """The whole seconds and the milliseconds left over.

        The seconds are rounded down, so the milliseconds are
        never negative.

        Example
        -------

        >>> Duration(milliseconds=1_500).lengths()
        (1, 500)
        >>> Duration(milliseconds=-1_500).lengths()
        (-2, 500)

        """
        return split_cycles(self._total_ms, 1_000)

    def __eq__(self, other: object) -> bool:
        """Compare for equality

        Example
        -------

        >>> d = Duration(hours=1, minutes=30)
        >>> d == Duration(minutes=90)
        True
        >>> d == Duration(hours=2)
        False

        """
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ms == other._total_ms

    def __hash__(self) -> int:
        return hash(self._total_ms)

    def __lt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ms < other._total_ms

    def __le__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ms <= other._total_ms

    def __gt__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ms > other._total_ms

    def __ge__(self, other: Duration) -> bool:
        if not isinstance(other, Duration):
            return NotImplemented
        return self._total_ms >= other._total_ms

    def __bool__(self) -> bool:
        """True if the duration is non-zero"""
        return bool(self._total_ms)

    def __add__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(milliseconds=self._total_ms + other._total_ms)

    def __sub__(self, other: Duration) -> Duration:
        if not isinstance(other, Duration):
            return NotImplemented
        return Duration(milliseconds=self._total_ms - other._total_ms)

    def __mul__(self, other: int) -> Duration:
        """Multiply by a whole number

        Example
        -------

        >>> Duration(minutes=45) * 2
        Duration(01:30:00)

        """
        if not isinstance(other, int):
            return NotImplemented
        return Duration(milliseconds=self._total_ms * other)

    __rmul__ = __mul__

    def __neg__(self) -> Duration:
        return Duration(milliseconds=-self._total_ms)

    def __abs__(self) -> Duration:
        return Duration(milliseconds=abs(self._total_ms))

    def as_tuple(self) -> tuple[int, int, int, int]:
        """Convert to a tuple of (hours, minutes, seconds, milliseconds)

        Example
        -------

        >>> Duration(hours=1, minutes=30, milliseconds=5_090).as_tuple()
        (1, 30, 5, 90)

        """
        hours, rem = divmod(abs(self._total_ms), 3_600_000)
        mins, rem = divmod(rem, 60_000)
        secs, ms = divmod(rem, 1_000)
        return (
            (hours, mins, secs, ms)
            if self._total_ms >= 0
            else (-hours, -mins, -secs, -ms)
        )

    def canonical_format(self) -> str:
        """The duration in canonical format.

        The format is:

        .. code-block:: text

           HH:MM:SS(.mmm)

        For example:

        .. code-block:: text

           01:24:45.089

        """
        hrs, mins, secs, ms = abs(self).as_tuple()
        return (
            f"{'-'*(self._total_ms < 0)}{hrs:02}:{mins:02}:{secs:02}"
            + f".{ms:03}" * bool(ms)
        )

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"Duration({self})"


Duration.ZERO = Duration()


class Instant:
    """An exact point on the timeline, counted in seconds and milliseconds
    since midnight, 1 January 1970. It has no calendar and no timezone.

    Example
    -------

    >>> Instant.at_ms(1_234_567_890, 250)
    Instant(seconds=1234567890, milliseconds=250)

    """

    __slots__ = ("_total_ms",)

    def __init__(self, seconds: int, milliseconds: int = 0) -> None:
        self._total_ms = seconds * 1_000 + milliseconds

    @classmethod
    def at(cls, seconds: int, /) -> Instant:
        return cls(seconds)

    @classmethod
    def at_ms(cls, seconds: int, milliseconds: int, /) -> Instant:
        """Create from seconds since 1970 and a millisecond offset,
        which is normalized into ``[0, 1000)``"""
        return cls(seconds, milliseconds)

    @classmethod
    def now(cls, clock: Clock | None = None) -> Instant:
        """The current instant according to the clock,
        which defaults to :func:`system_clock`"""
        return cls(*(clock or system_clock)())

    @property
    def seconds(self) -> int:
        return self._total_ms // 1_000

    @property
    def milliseconds(self) -> int:
        return self._total_ms % 1_000

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._total_ms == other._total_ms

    def __hash__(self) -> int:
        return hash(self._total_ms)

    def __lt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._total_ms < other._total_ms

    def __le__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._total_ms <= other._total_ms

    def __gt__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._total_ms > other._total_ms

    def __ge__(self, other: Instant) -> bool:
        if not isinstance(other, Instant):
            return NotImplemented
        return self._total_ms >= other._total_ms

    def __add__(self, other: Duration) -> Instant:
        if not isinstance(other, Duration):
            return NotImplemented
        return Instant(0, self._total_ms + other._total_ms)

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: Instant) -> Duration: ...

        @overload
        def __sub__(self, other: Duration) -> Instant: ...

        def __sub__(self, other: Instant | Duration) -> Instant | Duration: ...

    else:

        def __sub__(self, other: Instant | Duration) -> Instant | Duration:
            """Subtract a duration, or another instant to get the duration
            between them

            Example
            -------

            >>> Instant.at(60) - Duration.of(90)
            Instant(seconds=-30, milliseconds=0)
            >>> Instant.at(60) - Instant.at_ms(0, 500)
            Duration(00:00:59.500)
            """
            if isinstance(other, Instant):
                return Duration(milliseconds=self._total_ms - other._total_ms)
            elif isinstance(other, Duration):
                return Instant(0, self._total_ms - other._total_ms)
            return NotImplemented

    def __repr__(self) -> str:
        return (
            f"Instant(seconds={self.seconds}, "
            f"milliseconds={self.milliseconds})"
        )


class DateTime:
    """A date and time of day without a timezone.

    Examples of when to use this type:

    - You need to express a date and time as it would be observed locally
      on the "wall clock" or calendar.
    - In the rare case you truly don't need to account for timezones,
      for example when modeling time in a simulation game.

    Note
    ----

    The canonical string format is:

    .. code-block:: text

       YYYY-MM-DDTHH:MM:SS.mmm

    Example
    -------

    >>> DateTime(Date(2009, 2, 13), Time(23, 31, 30))
    DateTime(2009-02-13T23:31:30.000)

    """

    __slots__ = ("_date", "_time")

    def __init__(self, date: Date, time: Time) -> None:
        if not (isinstance(date, Date) and isinstance(time, Time)):
            raise TypeError(
                "DateTime needs a Date and a Time, "
                f"got {type(date).__name__} and {type(time).__name__}"
            )
        self._date = date
        self._time = time

    @classmethod
    def at(cls, seconds: int, /) -> DateTime:
        """Create from the number of seconds since midnight,
        1 January 1970

        Example
        -------

        >>> DateTime.at(1_234_567_890)
        DateTime(2009-02-13T23:31:30.000)

        """
        return cls.at_ms(seconds, 0)

    @classmethod
    def at_ms(cls, seconds: int, millisecond: int, /) -> DateTime:
        # Split into days and seconds, and let Date and Time do the rest
        days, secs = split_cycles(
            seconds - EPOCH_DIFFERENCE * SECONDS_IN_DAY, SECONDS_IN_DAY
        )
        return cls(
            Date.from_days_since_epoch(days),
            Time.from_seconds_and_milliseconds_since_midnight(
                secs, millisecond
            ),
        )

    @classmethod
    def from_instant(cls, instant: Instant, /) -> DateTime:
        """Create from an :class:`Instant`. Inverse of :meth:`to_instant`."""
        return cls.at_ms(instant.seconds, instant.milliseconds)

    def to_instant(self) -> Instant:
        """The :class:`Instant` of this datetime, taking it as if in UTC.
        Inverse of :meth:`from_instant`.

        Example
        -------

        >>> DateTime(Date(1970, 1, 2), Time(0, 0, 1, 5)).to_instant()
        Instant(seconds=86401, milliseconds=5)

        """
        return Instant.at_ms(
            self._date._ymd.to_days_since_epoch() * SECONDS_IN_DAY
            + self._time.to_seconds(),
            self._time._millisecond,
        )

    @classmethod
    def now(cls, clock: Clock | None = None) -> DateTime:
        """The current date and time according to the clock,
        which defaults to :func:`system_clock`

        Example
        -------

        >>> DateTime.now(clock=lambda: (0, 0))
        DateTime(1970-01-01T00:00:00.000)

        """
        return cls.at_ms(*(clock or system_clock)())

    def date(self) -> Date:
        """The date part of the datetime

        Example
        -------

        >>> DateTime.at(0).date()
        Date(1970-01-01)

        """
        return self._date

    def time(self) -> Time:
        return self._time

    if TYPE_CHECKING:

        @property
        def year(self) -> int: ...

        @property
        def month(self) -> Month: ...

        @property
        def day(self) -> int: ...

        @property
        def yearday(self) -> int: ...

        @property
        def weekday(self) -> Weekday: ...

        @property
        def hour(self) -> int: ...

        @property
        def minute(self) -> int: ...

        @property
        def second(self) -> int: ...

        @property
        def millisecond(self) -> int: ...

    else:
        # Defining properties this way is faster than declaring a `def`,
        # but the type checker doesn't like it.
        year = property(attrgetter("_date._ymd.year"))
        month = property(attrgetter("_date._ymd.month"))
        day = property(attrgetter("_date._ymd.day"))
        yearday = property(attrgetter("_date._yearday"))
        weekday = property(attrgetter("_date._weekday"))
        hour = property(attrgetter("_time._hour"))
        minute = property(attrgetter("_time._minute"))
        second = property(attrgetter("_time._second"))
        millisecond = property(attrgetter("_time._millisecond"))

    def add_seconds(self, seconds: int, /) -> DateTime:
        """Shift by a number of seconds

        Example
        -------

        >>> DateTime(Date(2016, 2, 28), Time(23, 0)).add_seconds(7200)
        DateTime(2016-02-29T01:00:00.000)

        """
        return self + Duration.of(seconds)

    def canonical_format(self, sep: Literal[" ", "T"] = "T") -> str:
        return f"{self._date}{sep}{self._time}"

    __str__ = canonical_format

    def __repr__(self) -> str:
        return f"DateTime({self})"

    def _sort_key(self) -> tuple[_YMD, tuple[int, int, int, int]]:
        return (self._date._ymd, self._time._as_tuple())

    if not TYPE_CHECKING:  # pragma: no branch

        def __eq__(self, other: object) -> bool:
            """Compare for equality

            Example
            -------

            >>> DateTime.at(0) == DateTime(Date(1970, 1, 1), Time.midnight())
            True

            """
            if not isinstance(other, DateTime):
                return NotImplemented
            return self._sort_key() == other._sort_key()

    def __hash__(self) -> int:
        return hash(self._sort_key())

    def __lt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: DateTime) -> bool:
        if not isinstance(other, DateTime):
            return NotImplemented
        return self._sort_key() >= other._sort_key()

    def __add__(self, other: Duration) -> DateTime:
        """Add a duration to this datetime

        Example
        -------

        >>> d = DateTime(Date(2020, 12, 31), Time(23, 12))
        >>> d + Duration(hours=1, seconds=5)
        DateTime(2021-01-01T00:12:05.000)
        """
        if not isinstance(other, Duration):
            return NotImplemented
        return DateTime.from_instant(self.to_instant() + other)

    if TYPE_CHECKING:

        @overload
        def __sub__(self, other: DateTime) -> Duration: ...

        @overload
        def __sub__(self, other: Duration) -> DateTime: ...

        def __sub__(
            self, other: DateTime | Duration
        ) -> DateTime | Duration: ...

    else:

        def __sub__(self, other: DateTime | Duration) -> DateTime | Duration:
            """Subtract another datetime or a duration

            Example
            -------

            >>> d = DateTime(Date(2020, 3, 1), Time(0, 30))
            >>> d - Duration(hours=1)
            DateTime(2020-02-29T23:30:00.000)
            >>> d - DateTime(Date(2020, 2, 28), Time(0, 0))
            Duration(48:30:00)
            """
            if isinstance(other, DateTime):
                return self.to_instant() - other.to_instant()
            elif isinstance(other, Duration):
                return DateTime.from_instant(self.to_instant() - other)
            return NotImplemented

    def __copy__(self) -> DateTime:
        return self

    def __deepcopy__(self, _: object) -> DateTime:
        return self

    # a custom pickle implementation with a smaller payload
    def __reduce__(self) -> tuple[object, ...]:
        year, month, day = self._date._ymd
        return (
            _unpkl_datetime,
            (year, int(month), day) + self._time._as_tuple(),
        )


# A separate unpickling function allows us to make backwards-compatible changes
# to the pickling format in the future
@no_type_check
def _unpkl_datetime(year, month, day, *time) -> DateTime:
    return DateTime(_unpkl_date(year, month, day), _unpkl_time(*time))


#: Anything returning the current time as
#: ``(seconds since 1970, millisecond of that second)``
Clock = Callable[[], Tuple[int, int]]


def system_clock() -> tuple[int, int]:
    """Read the wall clock of the operating system"""
    seconds, nanos = divmod(_time_ns(), 1_000_000_000)
    return seconds, nanos // 1_000_000


# Helpers that pre-compute/lookup as much as possible
_object_new = object.__new__


def hours(i: int, /) -> Duration:
    """Create a :class:`~Duration` with the given number of hours.
    ``hours(1) == Duration(hours=1)``
    """
    return Duration(hours=i)


def minutes(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of minutes.
    ``minutes(1) == Duration(minutes=1)``
    """
    return Duration(minutes=i)


def seconds(i: int, /) -> Duration:
    """Create a :class:`Duration` with the given number of seconds.
    ``seconds(1) == Duration.of(1)``
    """
    return Duration.of(i)
