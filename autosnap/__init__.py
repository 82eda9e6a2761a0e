"""
zfs-autosnap - generational snapshot rotation for ZFS

Takes periodic snapshots of opted-in datasets and garbage-collects them
according to a per-dataset grandfather-father-son retention policy.
"""

try:
    from importlib.metadata import version

    __version__ = version("zfs-autosnap")
except Exception:
    __version__ = "0.0.0"  # Fallback for development

__url__ = "https://github.com/rollcat/zfs-autosnap"
