import datetime
import os
import random
import sys
import uuid

import numpy as np

# Add project root to path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from wattzup.common.database import (
    create_db_engine, create_session_factory, init_db,
    StationDB, ObservationDB, SessionStatsHourlyDB
)

# Simulation Configuration
NUM_STATIONS = 20
OBSERVATIONS_PER_STATION = 15
OBSERVATION_TTL_DAYS = 7
NETWORKS = ["Electrify America", "ChargePoint", "EVgo", "Tesla"]

def generate_data(database_url=None, num_stations=NUM_STATIONS, seed=42):
    """
    Seeds stations, recent crowd reports and a full week of hourly
    aggregates. Returns the generated station ids.
    """
    random.seed(seed)
    rng = np.random.default_rng(seed)

    engine = create_db_engine(database_url)
    init_db(engine)
    session_factory = create_session_factory(engine)

    now = datetime.datetime.now(datetime.timezone.utc)
    station_ids = []

    with session_factory() as session:
        for i in range(num_stations):
            # Half DC fast, half Level 2
            is_dc_fast = i % 2 == 0
            station_id = str(uuid.uuid4())
            station_ids.append(station_id)

            session.add(StationDB(
                id=station_id,
                external_id=f"demo-{i:04d}",
                source="demo",
                name=f"Demo Station {i}",
                latitude=37.77 + rng.normal(0, 0.05),
                longitude=-122.42 + rng.normal(0, 0.05),
                network=random.choice(NETWORKS),
                stalls_total=random.choice([2, 4, 6, 8, 12]),
                max_power_kw=random.choice([150, 250, 350]) if is_dc_fast else random.choice([None, 7, 19]),
                created_at=now,
                updated_at=now,
            ))
            # Station rows must exist before rows referencing them
            session.flush()

            median = 25.0 if is_dc_fast else 120.0
            for day in range(7):
                for hour in range(24):
                    # Busier in the evening commute
                    load = 1.3 if 16 <= hour <= 20 else 1.0
                    session_min = max(5.0, rng.normal(median * load, median * 0.15))
                    session.add(SessionStatsHourlyDB(
                        station_id=station_id,
                        day_of_week=day,
                        hour_of_day=hour,
                        median_session_min=round(session_min, 2),
                        p75_session_min=round(session_min * 1.4, 2),
                        avg_queue_length=round(float(rng.gamma(1.0, 0.5 * load)), 2),
                        sample_count=int(rng.integers(5, 200)),
                        last_computed_at=now - datetime.timedelta(minutes=int(rng.integers(0, 180))),
                    ))

            for _ in range(random.randint(0, OBSERVATIONS_PER_STATION)):
                observed_at = now - datetime.timedelta(minutes=int(rng.integers(0, 180)))
                observation_type = random.choice(["in_queue", "done_charging", "plugged_in", "available"])
                session.add(ObservationDB(
                    station_id=station_id,
                    user_hash=uuid.uuid4().hex,
                    observation_type=observation_type,
                    queue_position=int(rng.integers(0, 5)) if observation_type == "in_queue" else None,
                    session_duration_min=(
                        int(max(5, rng.normal(median, median * 0.2)))
                        if observation_type == "done_charging" else None
                    ),
                    trust_score=0.5,
                    observed_at=observed_at,
                    expires_at=observed_at + datetime.timedelta(days=OBSERVATION_TTL_DAYS),
                ))

        session.commit()

    print(f"Generated {len(station_ids)} demo stations")
    return station_ids

if __name__ == "__main__":
    generate_data(os.getenv("DATABASE_URL"))
