"""Policy resolution: ambient flags → an immutable PolicyContext."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from sqlgate.config import GateConfig, parse_flag

READ_ONLY_ENV = "READ_ONLY"
ADMIN_OVERRIDE_ENV = "ADMIN_OVERRIDE"
REQUIRE_APPROVAL_ENV = "REQUIRE_APPROVAL"


@dataclass(frozen=True)
class PolicyContext:
    """Policy snapshot for one validation call.

    When ``read_only`` is off every operation class is permitted, whatever
    ``admin_override`` says. ``require_approval`` only affects ``decide``.
    """

    read_only: bool = True
    admin_override: bool = False
    require_approval: bool = False


def _pick(
    name: str,
    env: Mapping[str, str],
    config: GateConfig | None,
    *,
    default: bool,
) -> bool:
    if name in env:
        return parse_flag(env[name], default=default)
    if config is not None and name.lower() in config.policy:
        return parse_flag(config.policy[name.lower()], default=default)
    return default


def resolve_policy(
    environ: Mapping[str, str] | None = None,
    config: GateConfig | None = None,
) -> PolicyContext:
    """Build a PolicyContext from the environment, then the config file.

    Absent or unparseable values fall back to the safe defaults: read-only
    enforced, no admin override. Call this once per validation; never keep
    the result around between requests.
    """
    env = os.environ if environ is None else environ
    return PolicyContext(
        read_only=_pick(READ_ONLY_ENV, env, config, default=True),
        admin_override=_pick(ADMIN_OVERRIDE_ENV, env, config, default=False),
        require_approval=_pick(REQUIRE_APPROVAL_ENV, env, config, default=False),
    )
