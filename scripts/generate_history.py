import argparse
import os
import sys
from datetime import datetime, timedelta

import numpy as np
import pandas as pd

# Add project root to path to import transitops
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from transitops.common.congestion import DEFAULT_THRESHOLDS
from transitops.common.schemas import PassengerReading, TrafficReading
from transitops.simulation import default_topology
from transitops.simulation.generators import rush_hour_multiplier, segment_speed

WEATHER_CONDITIONS = ["sunny", "cloudy", "rainy", "snowy", "foggy"]
WEATHER_PROBABILITIES = [0.45, 0.3, 0.15, 0.03, 0.07]

def generate_data(days=28, seed=7, output_file="data/history/transit_history.csv"):
    """
    Writes hourly passenger counts per station and congestion per road
    segment, in the CSV layout read by `load_history_csv`.
    """
    rng = np.random.default_rng(seed)
    topology = default_topology()
    stations = list(dict.fromkeys(s for r in topology.routes for s in r.stations))
    segments = [
        f"{r.route_id}-segment-{i}"
        for r in topology.routes
        for i in range(max(0, len(r.path) - 1))
    ]
    print(f"Generating {days} days of history for {len(stations)} stations and {len(segments)} segments...")

    start = datetime.now().replace(minute=0, second=0, microsecond=0) - timedelta(days=days)
    rows = []
    for hour_offset in range(days * 24):
        timestamp = start + timedelta(hours=hour_offset)
        weather = str(rng.choice(WEATHER_CONDITIONS, p=WEATHER_PROBABILITIES))
        multiplier = rush_hour_multiplier(timestamp.hour)
        weekend = timestamp.weekday() >= 5

        for station in stations:
            base = 60 * multiplier * (0.6 if weekend else 1.0)
            reading = PassengerReading(
                station=station,
                timestamp=timestamp,
                passenger_count=max(0, int(rng.normal(base, base * 0.15 + 1))),
                waiting_time=5,
                boarding_rate=20,
            )
            rows.append({
                "kind": "demand",
                "timestamp": reading.timestamp,
                "key": reading.station,
                "weather": weather,
                "passenger_count": reading.passenger_count,
            })

        for segment in segments:
            level = float(np.clip(rng.normal(0.2 * multiplier, 0.1), 0.0, 1.0))
            if weather in ("rainy", "snowy"):
                level = min(1.0, level * 1.2)
            reading = TrafficReading(
                road_segment=segment,
                timestamp=timestamp,
                congestion_level=level,
                status=DEFAULT_THRESHOLDS.classify(level),
                average_speed=segment_speed(level),
            )
            rows.append({
                "kind": "traffic",
                "timestamp": reading.timestamp,
                "key": reading.road_segment,
                "weather": weather,
                "congestion_level": round(reading.congestion_level, 4),
                "average_speed": round(reading.average_speed, 1),
            })

    df = pd.DataFrame(rows)
    df = df.sort_values(by="timestamp")
    print(df.head())

    os.makedirs(os.path.dirname(output_file) or ".", exist_ok=True)
    df.to_csv(output_file, index=False)
    print(f"Wrote {len(df)} rows to {output_file}")
    return df

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate synthetic transit history")
    parser.add_argument("--days", type=int, default=28)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--output", default="data/history/transit_history.csv")
    args = parser.parse_args()
    generate_data(args.days, args.seed, args.output)
