"""
Permission Evaluation
Checks a command's declared permission scopes against an invocation context
"""

from typing import Any, Dict, Optional

from chatcmd.commands.command import PERMISSION_SCOPES, PermissionRequirements


class PermissionResult:
    """
    Outcome of a permission check; on failure names one missing permission.

    ``subject`` is the side that lacks it: "self" for the bot, "author"
    for the invoker. For the ``both`` scope it is whichever side failed.
    """

    def __init__(
        self,
        passed: bool,
        scope: Optional[str] = None,
        permission: Optional[str] = None,
        subject: Optional[str] = None,
    ):
        self.passed = passed
        self.scope = scope
        self.permission = permission
        self.subject = subject

    @property
    def bot_missing(self) -> bool:
        return self.subject == "self"

    def __bool__(self) -> bool:
        return self.passed

    def __repr__(self) -> str:
        if self.passed:
            return "PermissionResult(passed=True)"
        return (
            f"PermissionResult(passed=False, scope={self.scope!r}, "
            f"permission={self.permission!r}, subject={self.subject!r})"
        )


PASSED = PermissionResult(True)


def evaluate_permissions(requirements: Optional[PermissionRequirements], ctx: Any) -> PermissionResult:
    """
    Evaluate permission requirements in ``both``, ``author``, ``self`` order.

    A scope passes when the set of its permissions the context confirms
    equals the full required set. The first failing scope is reported along
    with its first required permission (in declared order) that is missing,
    and the side lacking it.

    Args:
        requirements: Declared requirements, or None for no requirements
        ctx: Anything with ``lacking_subject(permission, target)``

    Returns:
        PermissionResult
    """
    if not requirements:
        return PASSED

    for scope in PERMISSION_SCOPES:
        required = requirements.get(scope)
        if not required:
            continue

        lacking: Dict[str, str] = {}
        for permission in required:
            subject = ctx.lacking_subject(permission, scope)
            if subject is not None:
                lacking[permission] = subject

        confirmed = set(required) - set(lacking)
        if confirmed == set(required):
            continue

        missing = next(permission for permission in required if permission not in confirmed)
        return PermissionResult(False, scope, missing, lacking[missing])

    return PASSED
