"""Forward GitHub release webhooks to a local Herald for manual testing.

Development helper only: it wraps the GitHub CLI's ``webhook forward``
extension so deliveries for a repository reach a locally running
``POST /payload`` without exposing it publicly.

Usage
-----
::

    herald-forward --repo acme/widget --url http://localhost:8080/payload

"""

from __future__ import annotations

import argparse
import subprocess
import threading
import typing as typ

from herald.logging import configure_logging, get_logger, log_error, log_info

__all__ = ["build_forward_command", "main", "start_github_webhook"]

logger = get_logger(__name__)

_DEFAULT_URL = "http://localhost:8080/payload"


def build_forward_command(repo: str, url: str, *, executable: str = "gh") -> list[str]:
    """Return the argv that forwards *repo*'s release events to *url*."""
    return [
        executable,
        "webhook",
        "forward",
        f"--repo={repo}",
        "--events=release",
        f"--url={url}",
    ]


def _pump(stream: typ.IO[str], label: str) -> None:
    """Log each line the CLI writes to *stream*."""
    for line in stream:
        log_info(logger, "gh %s: %s", label, line.rstrip("\n"))


def start_github_webhook(repo: str, url: str, *, executable: str = "gh") -> int:
    """Run ``gh webhook forward`` until it exits and return its exit code.

    Output from both pipes is logged line by line as it arrives.

    Raises
    ------
    OSError
        If the executable cannot be started.

    """
    command = build_forward_command(repo, url, executable=executable)
    log_info(logger, "running %s", " ".join(command))

    process = subprocess.Popen(  # noqa: S603 - fixed argv, no shell
        command,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        text=True,
    )
    pumps = [
        threading.Thread(target=_pump, args=(process.stdout, "stdout"), daemon=True),
        threading.Thread(target=_pump, args=(process.stderr, "stderr"), daemon=True),
    ]
    for pump in pumps:
        pump.start()

    code = process.wait()
    for pump in pumps:
        pump.join()

    log_info(logger, "gh process exited with code %d", code)
    return code


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and forward webhooks until ``gh`` exits.

    Returns
    -------
    int
        The ``gh`` exit code, or 1 when it could not be started.

    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--repo", required=True, help="Repository as owner/name")
    parser.add_argument(
        "--url",
        default=_DEFAULT_URL,
        help=f"Local payload endpoint (default {_DEFAULT_URL})",
    )
    parser.add_argument("--gh", default="gh", help="GitHub CLI executable")
    parser.add_argument("--log-level", default="INFO", help="femtologging level")
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        return start_github_webhook(args.repo, args.url, executable=args.gh)
    except OSError as exc:
        log_error(logger, "could not start %s: %s", args.gh, exc)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
