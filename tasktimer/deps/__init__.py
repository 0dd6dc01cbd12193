# Marks `tasktimer.deps` as a real Python package so imports like
# `from tasktimer.deps.auth import require_user` work reliably.
