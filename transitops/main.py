import argparse
import asyncio
import json
from datetime import datetime, timedelta

from .common.config import ConfigManager
from .common.logging import setup_logger

logger = setup_logger("transitops")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="TransitOps - Transit Operations Backend")
    parser.add_argument('command', choices=['serve', 'snapshot', 'recommend', 'forecast', 'impact', 'feeds'],
                        help="Command to run")
    parser.add_argument('--profile', default='default', help="Config profile under conf/transit/")
    parser.add_argument('--config-dir', default='conf', help="Configuration directory")
    parser.add_argument('--model', default='demand', choices=['demand', 'congestion', 'trend'],
                        help="Forecast model (forecast command)")
    parser.add_argument('--keys', nargs='*', default=[], help="Forecast keys (forecast command)")
    parser.add_argument('--horizon', type=int, default=None, help="Forecast horizon in hours")
    parser.add_argument('--lat', type=float, default=19.0289, help="Event latitude (impact command)")
    parser.add_argument('--lng', type=float, default=73.1095, help="Event longitude (impact command)")
    parser.add_argument('--size', type=int, default=5000, help="Event attendees (impact command)")
    return parser


def main(argv=None):
    """
    Entry point. Unknown arguments are applied as config overrides,
    e.g. `simulation.seed=7 thresholds.high=0.8`.
    """
    args, unknown = build_parser().parse_known_args(argv)
    cfg = ConfigManager(args.config_dir).load(args.profile, overrides=unknown)

    if args.command == 'serve':
        import uvicorn
        from .presentation.api import app, configure

        refresher = configure(cfg)

        @app.on_event("startup")
        async def startup_event():
            await refresher.start_all()

        @app.on_event("shutdown")
        async def shutdown_event():
            await refresher.stop_all()

        logger.info(f"Starting server at http://{cfg.server.host}:{cfg.server.port}")
        uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)
        return

    from .application import TransitApplicationBuilder

    # One-shot commands run without simulated latency
    cfg.simulation.latency_min_seconds = 0.0
    cfg.simulation.latency_max_seconds = 0.0
    service = TransitApplicationBuilder(cfg, args.config_dir).build_data_service()

    if args.command == 'snapshot':
        result = asyncio.run(service.fetch_snapshot()).model_dump(mode="json")
    elif args.command == 'recommend':
        result = [r.model_dump(mode="json") for r in asyncio.run(service.generate_optimization_recommendations())]
    elif args.command == 'forecast':
        keys = args.keys or service.topology.route_ids
        result = service.forecast(args.model, keys, horizon_hours=args.horizon)
    elif args.command == 'impact':
        now = datetime.now()
        result = service.trend_predictor.predict_event_impact(
            (args.lat, args.lng), args.size, now, now + timedelta(hours=3)
        )
    else:
        feeds = asyncio.run(service.fetch_feeds())
        result = {name: [r.model_dump(mode="json") for r in readings] for name, readings in feeds.items()}

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
