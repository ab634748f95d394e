from __future__ import annotations

from remove_unused_js_imports._main import main

if __name__ == "__main__":
    raise SystemExit(main())
