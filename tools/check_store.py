from __future__ import annotations

import os
from pathlib import Path

from pawpal.ledger import summarize_day
from pawpal.store import connect_db, init_db, load_logs, load_profile, load_progress


def main() -> None:
    db_path = Path(os.environ.get("PAWPAL_DB_PATH", "pawpal.db")).resolve()
    with connect_db(db_path) as conn:
        init_db(conn)
        profile = load_profile(conn)
        logs = load_logs(conn)
        progress = load_progress(conn)

    print(f"db={db_path}")
    if profile is None:
        print("profile=None")
    else:
        print(f"profile={profile.name} ({profile.breed}) {profile.weight_kg}kg age={profile.age}")
        print(f"target_kcal={profile.target_nutrients.calories} target_water={profile.target_nutrients.water}")
    print(f"logs={len(logs)}")
    print(f"xp={progress.xp} level={progress.level} badges={[b.id for b in progress.badges]}")
    for log in logs[-7:]:
        stats = summarize_day(log)
        print(f"{log.date} meals={len(log.meals)} activities={len(log.activities)} net_kcal={stats.net_calories:.0f}")


if __name__ == "__main__":
    main()
