"""upsert-pr entry point.

Runs as a GitHub Actions step (inputs from INPUT_* env vars) or locally with
a YAML config. Usage: upsert-pr [--config FILE] [--check].
"""

import argparse
import logging
import sys
from pathlib import Path

from upsert_pr.adapters.github import GitHubAdapter
from upsert_pr.config import load_config
from upsert_pr.logging import setup_logging
from upsert_pr.outputs import ActionOutputs
from upsert_pr.upsert import upsert_pr


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="upsert-pr",
        description="Create a pull request for a branch, or update the open one",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Optional YAML config file (inputs, github, logging sections)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    return parser.parse_args(argv if argv is not None else sys.argv[1:])


def main(argv: list[str] | None = None, outputs: ActionOutputs | None = None) -> int:
    """Entry point: load config, upsert the PR, write outputs."""
    args = parse_args(argv)
    log = logging.getLogger("upsert_pr")

    try:
        config = load_config(args.config)
        setup_logging(config.logging)
        if outputs is None:
            outputs = ActionOutputs(Path(config.github.output) if config.github.output else None)

        inputs = config.inputs
        inputs.require("pr_source_branch", "pr_destination_branch", "github_token")
        owner, repo = config.github.owner_and_repo()

        if args.check:
            print("Config OK:", f"{owner}/{repo}", inputs.pr_source_branch, "->", inputs.pr_destination_branch)
            return 0

        adapter = GitHubAdapter(token=inputs.github_token, api_url=config.github.api_url)
        upsert_pr(adapter, inputs, owner, repo, outputs=outputs, log=log)
    except KeyboardInterrupt:
        return 130
    except Exception as e:
        log.exception("Fatal error: %s", e)
        if outputs is None:
            outputs = ActionOutputs()
        outputs.set_failed(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
