from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Optional

from .catalog import build_locale_index, load_catalogs, write_locale_manifests
from .config import BuildConfig, load_config
from .log import get_logger, setup_logging
from .render import create_environment, load_components, render_all
from .static import copy_static_files
from .utils import clean_output_dir

logger = get_logger()


def build_site(config: BuildConfig, project_root: Optional[Path] = None) -> list[Path]:
    """Run the whole build and return the rendered document paths."""
    project_root = project_root or Path.cwd()
    logger.info("Starting build...")

    catalogs = load_catalogs(config.locales_dir, config.default_locale)

    components = load_components(config.components_dir, config.template_extensions)
    env = create_environment(config, components)

    if config.clean and clean_output_dir(config.output_dir, project_root):
        logger.debug("Removed previous output: %s", config.output_dir)
    config.output_dir.mkdir(parents=True, exist_ok=True)

    copy_static_files(config.templates_dir, config.output_dir, config.exclude_patterns)

    index = build_locale_index(catalogs)
    write_locale_manifests(catalogs, index, config.output_dir)

    written = render_all(env, catalogs, index, config)
    logger.info("Build complete!")
    return written


def main(argv: Optional[list[str]] = None) -> int:
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument(
        "--config",
        default="site.toml",
        help="Path to site config file (TOML/YAML/JSON).",
    )
    pre_args, _ = pre_parser.parse_known_args(argv)
    setup_logging()
    config = BuildConfig.from_mapping(load_config(Path(pre_args.config)))

    parser = argparse.ArgumentParser(description="Multi-language static site generator.")
    parser.add_argument("--config", default=pre_args.config, help="Path to site config file (TOML/YAML/JSON).")
    parser.add_argument("--locales", default=str(config.locales_dir), help="Directory containing locale catalogs.")
    parser.add_argument("--templates", default=str(config.templates_dir), help="Directory containing page templates.")
    parser.add_argument(
        "--components",
        default=str(config.components_dir),
        help="Directory containing reusable template components.",
    )
    parser.add_argument("--output", default=str(config.output_dir), help="Output directory for the site.")
    parser.add_argument("--default-locale", default=config.default_locale, help="Locale served without a prefix.")
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=config.clean,
        help="Remove the output directory before building.",
    )
    parser.add_argument("--log-file", default="", help="Also write a detailed build log to this file.")
    parser.add_argument("--verbose", action="store_true", help="Show debug messages on the console.")
    args = parser.parse_args(argv)

    config.locales_dir = Path(args.locales)
    config.templates_dir = Path(args.templates)
    config.components_dir = Path(args.components)
    config.output_dir = Path(args.output)
    config.default_locale = args.default_locale
    config.clean = args.clean
    setup_logging(verbose=args.verbose, log_file=Path(args.log_file) if args.log_file else None)

    start = time.perf_counter()
    try:
        build_site(config)
    except Exception as exc:
        logger.exception("Build failed: %s", exc)
        return 1
    elapsed = time.perf_counter() - start
    logger.info("Build completed in %.2fs.", elapsed)
    logger.info("Site generated in: %s", config.output_dir)
    return 0


if __name__ == "__main__":
    sys.exit(main())
