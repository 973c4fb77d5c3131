import pickle
from copy import copy, deepcopy
from datetime import date, timedelta

import pytest

from civiltime import (
    EPOCH_DIFFERENCE,
    Date,
    Month,
    OutOfRange,
    Weekday,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual

_DAY_ZERO = date(2000, 3, 1)


def _expected(days: int) -> date:
    return _DAY_ZERO + timedelta(days)


def _assert_matches(d: Date, expected: date) -> None:
    assert (d.year, d.month, d.day) == (
        expected.year,
        expected.month,
        expected.day,
    )
    assert d.weekday == expected.isoweekday()
    assert d.yearday == expected.timetuple().tm_yday


class TestInit:

    def test_basics(self):
        d = Date(2021, 1, 2)
        assert d.year == 2021
        assert d.month == 1
        assert d.month is Month.JANUARY
        assert d.day == 2
        assert d.yearday == 2
        assert d.weekday is Weekday.SATURDAY

    def test_ymd_same_as_constructor(self):
        assert Date.ymd(1969, Month.JULY, 20) == Date(1969, 7, 20)

    def test_derived_fields(self):
        d = Date(2016, 12, 31)
        assert d.yearday == 366
        assert d.weekday is Weekday.SATURDAY

    @pytest.mark.parametrize("month", [0, 13, -1])
    def test_invalid_month(self, month):
        with pytest.raises(OutOfRange):
            Date(2020, month, 1)

    @pytest.mark.parametrize("day", [0, -1])
    def test_invalid_day(self, day):
        with pytest.raises(OutOfRange):
            Date(2020, 1, day)

    @pytest.mark.parametrize("month", [1.5, 0.5, 12.5])
    def test_non_integral_month(self, month):
        with pytest.raises(OutOfRange):
            Date(2020, month, 1)

    def test_non_integer_day(self):
        with pytest.raises(TypeError):
            Date(2020, 1, 1.5)

    def test_out_of_range_is_value_error(self):
        with pytest.raises(ValueError, match="day 29"):
            Date(2100, 2, 29)


@pytest.mark.parametrize("year", [2004, 2008, 2012, 2016, 1600, 2000, -4])
def test_leap_days(year):
    d = Date(year, Month.FEBRUARY, 29)
    assert d.day == 29
    assert d.month is Month.FEBRUARY
    assert d.yearday == 60


@pytest.mark.parametrize(
    "year", [2005, 2009, 2013, 2017, 1601, 1602, 1900, 2100, -1]
)
def test_no_leap_days(year):
    with pytest.raises(OutOfRange):
        Date(year, Month.FEBRUARY, 29)


def test_days_past_end_of_month():
    for year in range(1, 3000):
        for month, day in [
            (Month.JANUARY, 32),
            (Month.FEBRUARY, 30),
            (Month.MARCH, 32),
            (Month.APRIL, 31),
            (Month.MAY, 32),
            (Month.JUNE, 31),
            (Month.JULY, 32),
            (Month.AUGUST, 32),
            (Month.SEPTEMBER, 31),
            (Month.OCTOBER, 32),
            (Month.NOVEMBER, 31),
            (Month.DECEMBER, 32),
        ]:
            with pytest.raises(OutOfRange):
                Date(year, month, day)


class TestYearDay:

    @pytest.mark.parametrize(
        "year, yearday, expected",
        [
            (2015, 256, Date(2015, 9, 13)),
            (2015, 268, Date(2015, 9, 25)),
            (2016, 268, Date(2016, 9, 24)),
            (2016, 366, Date(2016, 12, 31)),
            (2015, 1, Date(2015, 1, 1)),
            (-100, 60, Date(-100, 3, 1)),
        ],
    )
    def test_valid(self, year, yearday, expected):
        d = Date.yd(year, yearday)
        assert d == expected
        assert d.yearday == expected.yearday

    def test_zero_is_last_day_of_previous_year(self):
        assert Date.yd(2015, 0) == Date(2014, 12, 31)
        assert Date.yd(2017, 0).yearday == 366

    def test_day_366_of_common_year_rolls_over(self):
        assert Date.yd(2015, 366) == Date(2016, 1, 1)

    @pytest.mark.parametrize("yearday", [-1, 367, 1000])
    def test_out_of_range(self, yearday):
        with pytest.raises(OutOfRange):
            Date.yd(2015, yearday)


class TestWeekDate:

    @pytest.mark.parametrize(
        "year, week, weekday, expected",
        [
            (2015, 37, Weekday.FRIDAY, Date(2015, 9, 11)),
            (2009, 1, Weekday.MONDAY, Date(2008, 12, 29)),
            (2009, 53, Weekday.SUNDAY, Date(2010, 1, 3)),
            (2004, 1, Weekday.MONDAY, Date(2003, 12, 29)),
            (2004, 53, Weekday.SUNDAY, Date(2005, 1, 2)),
            (2005, 52, Weekday.SATURDAY, Date(2005, 12, 31)),
            (2008, 1, Weekday.TUESDAY, Date(2008, 1, 1)),
            (2020, 53, Weekday.THURSDAY, Date(2020, 12, 31)),
            (2020, 10, 3, Date(2020, 3, 4)),
        ],
    )
    def test_valid(self, year, week, weekday, expected):
        d = Date.ywd(year, week, weekday)
        assert d == expected
        assert d.weekday == weekday

    def test_matches_isocalendar(self):
        for days in range(-400, 3000, 3):
            expected = _expected(days)
            year, week, weekday = expected.isocalendar()
            d = Date.ywd(year, week, weekday)
            _assert_matches(d, expected)

    @pytest.mark.parametrize("weekday", [0, 8, 1.5])
    def test_invalid_weekday(self, weekday):
        with pytest.raises(OutOfRange):
            Date.ywd(2015, 10, weekday)

    def test_far_out_of_range_week(self):
        with pytest.raises(OutOfRange):
            Date.ywd(2015, 200, Weekday.MONDAY)
        with pytest.raises(OutOfRange):
            Date.ywd(2015, -100, Weekday.MONDAY)


class TestDaysSinceEpoch:

    def test_day_zero(self):
        d = Date.from_days_since_epoch(0)
        assert d == Date(2000, 3, 1)
        assert d.weekday is Weekday.WEDNESDAY
        assert d.yearday == 61

    def test_unix_epoch(self):
        d = Date.from_days_since_epoch(-EPOCH_DIFFERENCE)
        assert d == Date(1970, 1, 1)
        assert d.weekday is Weekday.THURSDAY

    @pytest.mark.parametrize(
        "d",
        [
            Date(1970, 1, 1),
            Date(1, 1, 1),
            Date(1971, 1, 1),
            Date(1973, 1, 1),
            Date(1977, 1, 1),
            Date(1989, 11, 10),
            Date(1990, 7, 8),
            Date(2014, 7, 13),
            Date(2001, 2, 3),
            Date(2400, 2, 29),
            Date(2000, 2, 29),
            Date(-753, 12, 1),
        ],
    )
    def test_roundtrip(self, d):
        again = Date.from_days_since_epoch(d.to_days_since_epoch())
        assert again == d
        assert again.yearday == d.yearday
        assert again.weekday == d.weekday

    def test_inverse_nearby(self):
        for days in range(-3_000, 3_000):
            d = Date.from_days_since_epoch(days)
            assert d.to_days_since_epoch() == days
            _assert_matches(d, _expected(days))

    def test_inverse_whole_range_of_stdlib(self):
        first = date.min.toordinal() - _DAY_ZERO.toordinal()
        last = date.max.toordinal() - _DAY_ZERO.toordinal()
        for days in range(first, last + 1, 997):
            d = Date.from_days_since_epoch(days)
            assert d.to_days_since_epoch() == days
            _assert_matches(d, _expected(days))

    @pytest.mark.parametrize("year", [1600, 1700, 1900, 2000, 2096, 2100])
    def test_around_new_year_and_leap_day(self, year):
        for month, day in [(1, 1), (2, 28), (3, 1), (12, 31)]:
            d = Date(year, month, day)
            _assert_matches(
                Date.from_days_since_epoch(d.to_days_since_epoch()),
                date(year, month, day),
            )

    def test_far_away(self):
        for days in (10**9, -(10**9), 10**15):
            d = Date.from_days_since_epoch(days)
            assert d.to_days_since_epoch() == days


class TestUnchecked:

    def test_equal_to_validated(self):
        d = Date._from_fields_unchecked(
            2015, Month.SEPTEMBER, 11, Weekday.FRIDAY, 254
        )
        assert d == Date(2015, 9, 11)
        assert hash(d) == hash(Date(2015, 9, 11))
        assert d.yearday == Date(2015, 9, 11).yearday

    def test_only_calendar_fields_compared(self):
        # wrong derived fields are the caller's problem
        d = Date._from_fields_unchecked(
            2015, Month.SEPTEMBER, 11, Weekday.MONDAY, 1
        )
        assert d == Date(2015, 9, 11)
        assert not d < Date(2015, 9, 11)


def test_equality():
    d = Date(2021, 1, 2)
    same = Date.yd(2021, 2)
    different = Date(2021, 1, 3)
    assert d == same
    assert not d == different
    assert not d == NeverEqual()
    assert d == AlwaysEqual()
    assert not d != same
    assert d != different
    assert d != NeverEqual()
    assert not d != AlwaysEqual()

    assert hash(d) == hash(same)
    assert hash(d) != hash(different)


def test_comparison():
    d = Date(2021, 5, 10)
    same = Date(2021, 5, 10)
    bigger = Date(2021, 5, 11)
    smaller = Date(2020, 12, 31)

    assert d <= same
    assert d <= bigger
    assert not d <= smaller
    assert d <= AlwaysLarger()
    assert not d <= AlwaysSmaller()

    assert not d < same
    assert d < bigger
    assert not d < smaller
    assert d < AlwaysLarger()
    assert not d < AlwaysSmaller()

    assert d >= same
    assert not d >= bigger
    assert d >= smaller
    assert not d >= AlwaysLarger()
    assert d >= AlwaysSmaller()

    assert not d > same
    assert not d > bigger
    assert d > smaller
    assert not d > AlwaysLarger()
    assert d > AlwaysSmaller()

    assert Date(-1, 12, 31) < Date(0, 1, 1) < Date(10000, 1, 1)


def test_ordering_follows_day_count():
    dates = [Date.from_days_since_epoch(n) for n in range(-800, 800, 7)]
    assert sorted(reversed(dates)) == dates


@pytest.mark.parametrize(
    "d, expected",
    [
        (Date(1600, 2, 28), "Date(1600-02-28)"),
        (Date(-753, 12, 1), "Date(-0753-12-01)"),
        (Date(10601, 1, 31), "Date(+10601-01-31)"),
        (Date(2021, 1, 2), "Date(2021-01-02)"),
        (Date(0, 6, 7), "Date(0000-06-07)"),
        (Date(9999, 12, 31), "Date(9999-12-31)"),
        (Date(-1, 1, 1), "Date(-0001-01-01)"),
    ],
)
def test_repr(d, expected):
    assert repr(d) == expected
    assert str(d) == expected[5:-1]


def test_copy():
    d = Date(2021, 1, 2)
    assert copy(d) is d
    assert deepcopy(d) is d


def test_pickling():
    d = Date(2020, 2, 29)
    loaded = pickle.loads(pickle.dumps(d))
    assert loaded == d
    assert loaded.weekday is Weekday.SATURDAY
    assert loaded.yearday == 60
