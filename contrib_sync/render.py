"""Render a schedule as a POSIX shell script.

Every commit is guarded by a ``grep -Fxq`` on the ledger file, so running the
script twice (or re-running a half-applied one) only creates the missing
commits.
"""

from typing import List

from .models import (
    AnnounceDirective,
    CommitDirective,
    DelayDirective,
    Directive,
    InitDirective,
    PublishDirective,
    Schedule,
)

RULE = "=" * 40


def _dq(value: str) -> str:
    """Escape for use inside a double-quoted shell string."""
    for char in ("\\", '"', "$", "`"):
        value = value.replace(char, "\\" + char)
    return value


def _init(directive: InitDirective) -> List[str]:
    ledger = _dq(directive.ledger_file)
    return [
        "# Initialize contributions tracking file",
        f'if [ ! -f "{ledger}" ] || [ ! -s "{ledger}" ]; then',
        f'  echo "{_dq(directive.header)}" > "{ledger}"',
        f'  git add "{ledger}"',
        '  git commit -m "Initialize contributions tracking"',
        "fi",
        "",
    ]


def _announce(directive: AnnounceDirective) -> List[str]:
    return [
        "",
        f'echo "{RULE}"',
        f'echo "Batch {directive.batch_index} of {directive.total_batches}"',
        f'echo "Processing {directive.event_count} contributions across'
        f' {directive.day_count} days..."',
        f'echo "{RULE}"',
        "",
    ]


def _commit(directive: CommitDirective) -> List[str]:
    event = directive.event
    ledger = _dq(directive.ledger_file)
    line = _dq(event.idempotency_key)
    name = _dq(directive.author.name)
    email = _dq(directive.author.email)
    env = (
        f'GIT_AUTHOR_NAME="{name}" GIT_AUTHOR_EMAIL="{email}" '
        f'GIT_COMMITTER_NAME="{name}" GIT_COMMITTER_EMAIL="{email}" '
        f'GIT_AUTHOR_DATE="{event.timestamp}" GIT_COMMITTER_DATE="{event.timestamp}"'
    )
    return [
        f'if ! grep -Fxq "{line}" "{ledger}" 2>/dev/null; then',
        f'  echo "{line}" >> "{ledger}"',
        f'  git add "{ledger}"',
        f'  {env} git commit -m "Contribution for {event.date.isoformat()}" > /dev/null',
        "fi",
    ]


def _publish(directive: PublishDirective, remote: str, branch: str, batched: bool) -> List[str]:
    lines: List[str] = [""]
    if batched:
        label = "final batch" if directive.final else "batch"
        lines.append(f'echo "Pushing {label} {directive.batch_index}..."')
    lines += [
        f"git pull {remote} {branch}",
        f"git push -f {remote} {branch}",
    ]
    if batched and directive.final:
        lines.append(
            f'echo "All batches complete! Pushed {directive.total_events} contributions."'
        )
    elif batched:
        lines.append(f'echo "Batch {directive.batch_index} pushed successfully!"')
    return lines


def _delay(directive: DelayDirective) -> List[str]:
    return [
        "",
        f'echo "Waiting {directive.seconds} seconds before next batch..."',
        f"sleep {directive.seconds}",
        "",
    ]


def render_directive(
    directive: Directive, remote: str = "origin", branch: str = "main", batched: bool = True
) -> List[str]:
    if isinstance(directive, InitDirective):
        return _init(directive)
    if isinstance(directive, AnnounceDirective):
        return _announce(directive)
    if isinstance(directive, CommitDirective):
        return _commit(directive)
    if isinstance(directive, PublishDirective):
        return _publish(directive, remote, branch, batched)
    if isinstance(directive, DelayDirective):
        return _delay(directive)
    raise TypeError(f"Unknown directive {directive!r}")


def render_script(schedule: Schedule, remote: str = "origin", branch: str = "main") -> str:
    if not schedule.directives:
        return ""
    batched = bool(schedule.directives_of("announce"))
    lines: List[str] = ["#!/bin/sh"]
    for directive in schedule.directives:
        lines.extend(render_directive(directive, remote, branch, batched))
    return "\n".join(lines) + "\n"
