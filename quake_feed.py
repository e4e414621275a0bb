"""
Recent earthquakes from the USGS GeoJSON summary feed, and the filter
that matches them against seismic windows.
"""
from collections import namedtuple
from datetime import datetime, timedelta, timezone

import requests

from seismic_errors import EventSourceUnavailable

USGS_ALL_MONTH = "https://earthquake.usgs.gov/earthquakes/feed/v1.0/summary/all_month.geojson"

SeismicEvent = namedtuple("SeismicEvent", ["id", "mag", "place", "time", "url", "coords"])


def parse_feature(feature):
    props = feature.get("properties") or {}
    geometry = feature.get("geometry") or {}

    t_ms = props.get("time")
    qt = datetime.fromtimestamp(t_ms / 1000, tz=timezone.utc) if t_ms is not None else None

    return SeismicEvent(
        id=feature.get("id"),
        mag=props.get("mag"),
        place=props.get("place") or "",
        time=qt,
        url=props.get("url") or "",
        coords=geometry.get("coordinates")
    )


def parse_feed(data, now, days=30):
    """
    Events from a decoded feed document that carry a time no older than
    `days` before `now`, newest first.
    """
    cutoff = now - timedelta(days=days)
    try:
        events = [parse_feature(f) for f in data.get("features") or []]
    except (AttributeError, TypeError, ValueError, OverflowError) as exc:
        raise EventSourceUnavailable(f"Malformed USGS feed: {exc}") from exc

    events = [q for q in events if q.time is not None and q.time >= cutoff]
    events.sort(key=lambda q: q.time, reverse=True)
    return events


def fetch_recent_events(now, days=30, url=USGS_ALL_MONTH, timeout=20):
    try:
        resp = requests.get(url, timeout=timeout)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as exc:
        raise EventSourceUnavailable(f"Failed to fetch USGS feed: {exc}") from exc

    if not isinstance(data, dict):
        raise EventSourceUnavailable("Malformed USGS feed: top level is not an object")
    return parse_feed(data, now, days)


def in_range(instant, start, end):
    return instant is not None and start <= instant <= end


def filter_in_range(events, start, end):
    """Events inside [start, end], in the order they were supplied."""
    return [q for q in events if in_range(q.time, start, end)]


def correlate_events(window_set, events):
    """
    One event list per window. When the feed is unavailable (events is
    None) every entry is None so callers can show a degraded state.
    """
    if events is None:
        return [None for _ in window_set.windows]
    return [filter_in_range(events, w.window_start, w.window_end) for w in window_set.windows]


def daily_counts(events):
    """(YYYY-MM-DD, count) pairs by UTC date, ascending."""
    counts = {}
    for q in events:
        if q.time is None:
            continue
        key = q.time.date().isoformat()
        counts[key] = counts.get(key, 0) + 1
    return sorted(counts.items())
