"""Module entry point for `python -m tfc_run_worker`."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
