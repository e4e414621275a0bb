import csv
import os
import sys
from datetime import datetime, timezone

from lunar_oracle import load_config, load_oracle
from calc_windows import compute_window_set
from quake_feed import USGS_ALL_MONTH, fetch_recent_events, correlate_events, daily_counts
from seismic_errors import EventSourceUnavailable, NoSyzygyFound

PRIMARY_LABEL = "Primary (closest to perigee)"


def fmt(dt):
    return dt.strftime("%Y-%m-%d %H:%M UTC")


def parse_now(argv):
    if len(argv) > 1:
        now = datetime.fromisoformat(argv[1].replace('Z', '+00:00'))
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(timezone.utc)
    return datetime.now(timezone.utc)


def window_rows(window_set):
    rows = []
    for idx, w in enumerate(window_set.windows):
        details = (
            f"Window: {fmt(w.window_start)} -> {fmt(w.window_end)}, "
            f"Perigee: {fmt(w.perigee_instant)} "
            f"({w.perigee_delta_days:.2f} days away, ~{w.perigee_distance_km:,.0f} km)"
        )
        if window_set.is_primary(idx):
            details += f", {PRIMARY_LABEL}"
        rows.append({
            "datetime": w.syzygy.instant.isoformat(),
            "event": f"{w.syzygy.type} Window",
            "details": details
        })
    return rows


def write_csv(filename, headers, rows):
    with open(filename, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=headers)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def print_windows(window_set, matches, max_listed):
    for idx, (w, quakes) in enumerate(zip(window_set.windows, matches)):
        flag = f"  [{PRIMARY_LABEL}]" if window_set.is_primary(idx) else ""
        print(f"\n{w.syzygy.type} Window{flag}")
        print(f"  Center:         {fmt(w.syzygy.instant)}")
        print(f"  Window:         {fmt(w.window_start)} -> {fmt(w.window_end)} (8 days)")
        print(f"  Nearest Perigee: {fmt(w.perigee_instant)} "
              f"({w.perigee_delta_days:.2f} days away, ~{w.perigee_distance_km:,.0f} km)")

        if quakes is None:
            print("  Quakes: unavailable")
            continue
        if not quakes:
            print("  No events in feed within this window.")
            continue
        for q in quakes[:max_listed]:
            mag = f"M{q.mag:.1f}" if q.mag is not None else "M?"
            print(f"  {mag} - {q.place} · {fmt(q.time)}  {q.url}")


def main(argv=None, config_path="config.json"):
    argv = sys.argv if argv is None else argv
    print("==========================================")
    print("     BERKLAND-STYLE SEISMIC WATCH         ")
    print("==========================================")

    config = load_config(config_path) if os.path.exists(config_path) else {}
    search = config.get("search", {})
    feed = config.get("feed", {})
    output = config.get("output", {})
    now = parse_now(argv)
    print(f"Now: {fmt(now)}")

    print("\n[1/4] Loading ephemeris...")
    oracle = load_oracle(config)

    print("\n[2/4] Searching syzygies and nearest perigees...")
    window_set = compute_window_set(
        oracle, now,
        days_forward=search.get("days_forward", 60),
        per_type=search.get("max_per_phase", 2),
        max_windows=search.get("max_windows", 2)
    )
    try:
        primary = window_set.primary
        print(f"  Primary window: {primary.syzygy.type} on {fmt(primary.syzygy.instant)}")
    except NoSyzygyFound as exc:
        print(f"  Warning: {exc}")

    print("\n[3/4] Fetching USGS earthquakes...")
    days = feed.get("days", 30)
    try:
        quakes = fetch_recent_events(
            now, days=days,
            url=feed.get("url", USGS_ALL_MONTH),
            timeout=feed.get("timeout_s", 20)
        )
        print(f"  {len(quakes)} events in the last {days} days.")
    except EventSourceUnavailable as exc:
        print(f"  Warning: {exc}")
        quakes = None

    matches = correlate_events(window_set, quakes)
    print_windows(window_set, matches, feed.get("max_listed", 50))

    print("\n[4/4] Writing CSV files...")
    windows_file = output.get("windows", "seismic_windows.csv")
    write_csv(windows_file, ["datetime", "event", "details"], window_rows(window_set))

    quake_rows = []
    for w, found in zip(window_set.windows, matches):
        for q in found or []:
            quake_rows.append({
                "window": w.syzygy.instant.isoformat(),
                "datetime": q.time.isoformat(),
                "magnitude": "" if q.mag is None else q.mag,
                "place": q.place,
                "url": q.url
            })
    quakes_file = output.get("quakes", "window_quakes.csv")
    write_csv(quakes_file, ["window", "datetime", "magnitude", "place", "url"], quake_rows)

    counts_file = output.get("daily_counts", "daily_quake_counts.csv")
    if quakes is not None:
        write_csv(counts_file, ["date", "count"],
                  [{"date": d, "count": c} for d, c in daily_counts(quakes)])
    else:
        print(f"  Warning: skipping {counts_file} (feed unavailable)")

    print("------------------------------------------")
    print(f"SUCCESS! {len(window_set.windows)} windows written to '{windows_file}'.")
    print("Timing windows are a heuristic toy based on lunar phase and perigee. Not a forecast.")
    print("==========================================")


if __name__ == "__main__":
    main()
