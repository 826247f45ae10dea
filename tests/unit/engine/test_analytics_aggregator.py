"""Unit tests for AnalyticsAggregator

Test coverage includes:

1. Summary
   - Counts links, clicks and active links within a scope.

2. Top links
   - Ordered by clicks, ties broken by newest creation.
   - Carries the newest click events and the number left out.

3. Click history
   - One zero-filled entry per UTC day of the window, oldest first.

4. Breakdowns
   - Counts per category; empty categories are left out.
   - Device breakdown adds up to the total clicks.
   - Hour of day categories are UTC hours.

5. Report
   - All views agree with each other.
"""

import pytest
from freezegun import freeze_time

from shortlinks.engine.analytics_aggregator import bucket_by_day, rank_top_links
from shortlinks.exceptions import LinkNotFoundError
from shortlinks.models import ClickDimension, LinkSummary


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def links(engine):
    """Three links of user u1 and one of user u2, with clicks on several days.

    clicks: aaa=3 (2026-03-10 09:15), bbb=3 (2026-03-12 14:00), ccc=1 (2026-03-12 14:30), zzz=2
    """
    registry, recorder = engine.registry, engine.recorder

    with freeze_time('2026-03-01 08:00:00'):
        a = registry.create('https://a.example.com', custom_code='aaa', scope='u1')
    with freeze_time('2026-03-02 08:00:00'):
        b = registry.create('https://b.example.com', custom_code='bbb', scope='u1')
    with freeze_time('2026-03-03 08:00:00'):
        c = registry.create('https://c.example.com', custom_code='ccc', scope='u1')
        z = registry.create('https://z.example.com', custom_code='zzz', scope='u2')

    with freeze_time('2026-03-10 09:15:00'):
        for _ in range(3):
            recorder.record('aaa', source='google.com', country='DE', device='Mobile')
    with freeze_time('2026-03-12 14:00:00'):
        for n in range(3):
            recorder.record('bbb', source='direct', country='US', device='Desktop', user_agent=f'agent-{n}')
    with freeze_time('2026-03-12 14:30:00'):
        recorder.record('ccc', source='', country='US', device='Mobile')
    with freeze_time('2026-03-12 15:00:00'):
        recorder.record('zzz', source='direct', country='FR', device='Tablet')
        recorder.record('zzz', source='direct', country='FR', device='Tablet')

    return {'a': a, 'b': b, 'c': c, 'z': z}


# -------------------------------
# 1. Summary
# -------------------------------


def test_summary(engine, links):
    assert engine.analytics.summary('u1') == LinkSummary(total_urls=3, total_clicks=7, active_urls=3)
    assert engine.analytics.summary('u2') == LinkSummary(total_urls=1, total_clicks=2, active_urls=1)
    assert engine.analytics.summary() == LinkSummary(total_urls=4, total_clicks=9, active_urls=4)


def test_summary_counts_expired_links_as_inactive(engine, links):
    engine.registry.create('https://old.example.com', custom_code='old', scope='u1', expiration_days=0)
    with pytest.raises(LinkNotFoundError):
        engine.registry.lookup('old')  # marks the link inactive

    assert engine.analytics.summary('u1') == LinkSummary(total_urls=4, total_clicks=7, active_urls=3)


def test_summary_of_empty_scope(engine):
    assert engine.analytics.summary('nobody') == LinkSummary(total_urls=0, total_clicks=0, active_urls=0)


# -------------------------------
# 2. Top links
# -------------------------------


def test_top_links_ties_broken_by_newest(engine, links):
    top = engine.analytics.top_links('u1')
    assert [entry.link.short_code for entry in top] == ['bbb', 'aaa', 'ccc']


def test_top_links_limit(engine, links):
    assert [entry.link.short_code for entry in engine.analytics.top_links('u1', n=2)] == ['bbb', 'aaa']
    assert engine.analytics.top_links('u1', n=0) == []


def test_top_links_recent_clicks(engine, links):
    bbb = engine.analytics.top_links('u1', n=1, recent=2)[0]

    assert [event.user_agent for event in bbb.recent_clicks] == ['agent-2', 'agent-1']
    assert bbb.remaining_clicks == 1


def test_top_links_without_recent_clicks(engine, links):
    bbb = engine.analytics.top_links('u1', n=1, recent=0)[0]

    assert bbb.recent_clicks == []
    assert bbb.remaining_clicks == 3


def test_rank_top_links_rejects_negative_values():
    with pytest.raises(ValueError):
        rank_top_links([], lambda link_id: [], n=-1, recent=5)


# -------------------------------
# 3. Click history
# -------------------------------


@freeze_time('2026-03-12 20:00:00')
def test_click_history_is_zero_filled(engine, links):
    history = engine.analytics.click_history('u1', window_days=5)

    assert [point.to_dict() for point in history] == [
        {'date': '2026-03-08', 'clicks': 0},
        {'date': '2026-03-09', 'clicks': 0},
        {'date': '2026-03-10', 'clicks': 3},
        {'date': '2026-03-11', 'clicks': 0},
        {'date': '2026-03-12', 'clicks': 4},
    ]


@freeze_time('2026-03-12 20:00:00')
def test_click_history_excludes_clicks_outside_window(engine, links):
    history = engine.analytics.click_history('u1', window_days=2)

    assert [point.clicks for point in history] == [0, 4]


@freeze_time('2026-03-12 20:00:00')
def test_click_history_without_links(engine):
    history = engine.analytics.click_history('nobody', window_days=30)

    assert len(history) == 30
    assert all(point.clicks == 0 for point in history)


@pytest.mark.parametrize('window_days', [0, 3651, 10**9])
def test_bucket_by_day_rejects_out_of_range_window(window_days):
    with pytest.raises(ValueError, match='window_days must be between 1 and 3650'):
        bucket_by_day([], window_days=window_days)


@freeze_time('2026-03-10 12:00:00')
def test_bucket_by_day_longest_window():
    history = bucket_by_day([], window_days=3650)

    assert len(history) == 3650
    assert history[-1].date.isoformat() == '2026-03-10'


# -------------------------------
# 4. Breakdowns
# -------------------------------


def test_source_breakdown_skips_empty_sources(engine, links):
    assert engine.analytics.breakdown('u1', ClickDimension.SOURCE) == {'google.com': 3, 'direct': 3}


def test_device_breakdown_adds_up_to_total_clicks(engine, links):
    breakdown = engine.analytics.breakdown('u1', ClickDimension.DEVICE)

    assert breakdown == {'Mobile': 4, 'Desktop': 3}
    assert sum(breakdown.values()) == engine.analytics.summary('u1').total_clicks


def test_country_breakdown_ordered_by_count(engine, links):
    assert list(engine.analytics.breakdown('u1', ClickDimension.COUNTRY).items()) == [('US', 4), ('DE', 3)]


def test_hour_of_day_breakdown(engine, links):
    assert engine.analytics.breakdown('u1', ClickDimension.HOUR_OF_DAY) == {9: 3, 14: 4}


def test_breakdown_excludes_removed_links(engine, links):
    engine.registry.remove(links['b'].id)
    assert engine.analytics.breakdown('u1', ClickDimension.DEVICE) == {'Mobile': 4}


# -------------------------------
# 5. Report
# -------------------------------


@freeze_time('2026-03-12 20:00:00')
def test_report_views_agree(engine, links):
    report = engine.analytics.report('u1', n=10, recent=5, window_days=30)

    assert report.summary == LinkSummary(total_urls=3, total_clicks=7, active_urls=3)
    assert sum(point.clicks for point in report.click_history) == report.summary.total_clicks
    assert sum(entry.link.clicks for entry in report.top_links) == report.summary.total_clicks
    assert set(report.breakdowns) == set(ClickDimension)
    assert sum(report.breakdowns[ClickDimension.HOUR_OF_DAY].values()) == report.summary.total_clicks

    body = report.to_dict()
    assert body['total_clicks'] == 7
    assert body['breakdowns']['hour_of_day'] == {'9': 3, '14': 4}
    assert [entry['short_code'] for entry in body['top_links']] == ['bbb', 'aaa', 'ccc']
