# sitemap_tool.py
# ---------------------------------------------------------------
# Command-line entry point: build sitemap.xml as a build step.
#   static-sitemap --config sitemap.json [--out public]
# ---------------------------------------------------------------

import argparse
import sys
from typing import List, Optional

from logging_setup import get_app_logger, setup_logging
from sitemap_helpers.errors import ConfigurationError, SitemapError
from sitemap_helpers.generator import generate_sitemap
from sitemap_helpers.sitemap_config import load_config

logger = get_app_logger("cli")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="static-sitemap", description="Generate sitemap.xml for a static site")
    p.add_argument("--config", required=True, help="JSON config file, e.g. sitemap.json")
    p.add_argument("--base", dest="baseUrl", help="e.g. https://example.com (overrides baseUrl)")
    source = p.add_mutually_exclusive_group()
    source.add_argument("--pages", dest="pagesDirectory", help="pages directory (overrides pagesDirectory and nextConfigPath)")
    source.add_argument("--manifest", dest="nextConfigPath", help="route manifest path or URL (overrides nextConfigPath)")
    p.add_argument("--out", dest="targetDirectory", help="output directory (overrides targetDirectory)")
    p.add_argument("--log-level", default="INFO", help="DEBUG, INFO, WARNING, ERROR")
    p.add_argument("--log-dir", default=None, help="also write a rotating log file here")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(log_level=args.log_level, log_dir=args.log_dir)

    overrides = {
        "baseUrl": args.baseUrl,
        "pagesDirectory": args.pagesDirectory,
        "nextConfigPath": args.nextConfigPath,
        "targetDirectory": args.targetDirectory,
    }
    # a manifest in the config file would otherwise win over --pages
    if args.pagesDirectory:
        overrides["nextConfigPath"] = ""

    try:
        config = load_config(args.config, overrides)
        out = generate_sitemap(config)
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return EXIT_CONFIG
    except SitemapError as e:
        logger.error("Sitemap generation failed: %s", e)
        return EXIT_FAILED

    print(f"Wrote {out}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
