import os
import os.path
import platform
from typing import Optional

SYSTEM = platform.system()
LOCALTIME = "/etc/localtime"

# Getting the system timezone key depends on the platform.
# On unix-like systems it's relatively straightforward.
# On other platforms, we use the tzlocal package.
# This keeps dependencies minimal for linux.
if SYSTEM in ("Linux", "Darwin"):  # pragma: no cover

    def _key_from_host() -> Optional[str]:
        tzif_path = os.path.realpath(LOCALTIME)
        if tzif_path == LOCALTIME:
            # If the file is not a symlink, we can't determine the tzid
            return None
        return _tzid_from_path(tzif_path)

else:  # pragma: no cover
    import tzlocal

    def _key_from_host() -> Optional[str]:
        return tzlocal.get_localzone_name()


def _tzid_from_path(path: str) -> Optional[str]:
    """Find the IANA timezone ID from a path to a zoneinfo file.
    Returns None if the path is not in a zoneinfo directory.
    """
    # Find the path segment containing 'zoneinfo',
    # e.g. `zoneinfo/` or `zoneinfo.default/`
    if (zoneinfo_at := path.rfind("zoneinfo")) == -1:
        return None
    if (index := path.find("/", zoneinfo_at)) == -1:
        return None
    return path[index + 1 :] or None


def get_tz_key() -> Optional[str]:
    """Get the key of the system timezone, or None if it can't be determined.

    The ``TZ`` environment variable takes precedence over the host
    configuration. Absolute paths in ``TZ`` are traced back to a key
    if they point into a zoneinfo directory.
    """
    try:
        tz_env = os.environ["TZ"]
    except KeyError:  # pragma: no cover
        return _key_from_host()
    else:
        if tz_env.startswith(":"):
            tz_env = tz_env[1:]  # strip leading colon

        if not tz_env:
            return None
        elif os.path.isabs(tz_env):
            return _tzid_from_path(os.path.realpath(tz_env))
        # NOTE: this may also be a POSIX TZ string, which only resolves
        # if the tz database happens to have a file of that name
        # (e.g. "EST5EDT").
        return tz_env
