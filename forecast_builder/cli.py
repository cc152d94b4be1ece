"""CLI entry point for the forecast image builder."""

import argparse
import logging

from forecast_builder.config.loader import get_config_value, load_config, require_identity
from forecast_builder.models.errors import ConfigurationError
from forecast_builder.pipeline.build_pipeline import BuildPipeline
from forecast_builder.storage.image_writer import FileImageWriter
from forecast_builder.storage.kv_cache import SqliteCache

DEFAULT_CONFIG = "forecast.yaml"


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="forecast_builder",
        description="Render weather.gov forecasts to images",
    )
    parser.add_argument(
        "--config", default=DEFAULT_CONFIG, help="Config YAML path"
    )
    parser.add_argument("--cache-db", help="Override cache SQLite path")
    parser.add_argument("--output-dir", help="Override output directory")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # build
    build_p = sub.add_parser("build", help="Build forecast images")
    build_p.add_argument("--only", help="Build a single location (name or file)")

    # config show / config get
    config_p = sub.add_parser("config", help="Config operations")
    config_sub = config_p.add_subparsers(dest="config_command")
    config_sub.add_parser("show", help="Display current config")
    get_p = config_sub.add_parser("get", help="Print one config value")
    get_p.add_argument("key", help="Dotted key, e.g. layout.alert_width")

    # cache purge
    cache_p = sub.add_parser("cache", help="Cache operations")
    cache_sub = cache_p.add_subparsers(dest="cache_command")
    cache_sub.add_parser("purge", help="Delete expired cache entries")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    if args.cache_db:
        config = config.model_copy(
            update={"cache": config.cache.model_copy(update={"db_path": args.cache_db})}
        )
    if args.output_dir:
        config = config.model_copy(
            update={"output": config.output.model_copy(update={"directory": args.output_dir})}
        )

    if args.command == "build":
        return _cmd_build(config, args)
    elif args.command == "config":
        return _cmd_config(config, args)
    elif args.command == "cache":
        return _cmd_cache(config, args)
    else:
        parser.print_help()
        return 1


def _cmd_build(config, args) -> int:
    try:
        require_identity(config)
    except ConfigurationError as e:
        print(f"Error: {e}")
        return 1

    cache = SqliteCache(config.cache.db_path)
    try:
        writer = FileImageWriter(config.output.directory)
        summary = BuildPipeline(config, cache, writer).run(only=args.only)
    finally:
        cache.close()

    print(
        f"Built {summary.locations_succeeded}/{summary.locations_attempted} images"
    )
    return 0 if summary.all_succeeded and summary.locations_attempted else 1


def _cmd_config(config, args) -> int:
    if args.config_command == "show":
        print(config.model_dump_json(indent=2))
        return 0
    elif args.config_command == "get":
        try:
            value = get_config_value(config, args.key)
        except (KeyError, IndexError, ValueError) as e:
            print(f"Error: {e}")
            return 1
        if hasattr(value, "model_dump_json"):
            print(value.model_dump_json(indent=2))
        else:
            print(value)
        return 0
    else:
        print("Use: config show | config get KEY")
        return 1


def _cmd_cache(config, args) -> int:
    if args.cache_command != "purge":
        print("Use: cache purge")
        return 1
    cache = SqliteCache(config.cache.db_path)
    try:
        removed = cache.purge_expired()
        print(f"Removed {removed} expired entries, {len(cache)} remaining")
    finally:
        cache.close()
    return 0
