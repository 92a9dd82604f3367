from techtalk.auth.permissions import AdminUserDep, require_admin

__all__ = ["AdminUserDep", "require_admin"]
