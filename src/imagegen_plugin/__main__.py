"""imagegen-plugin 入口点。

支持: python -m imagegen_plugin
"""

from .app import main

if __name__ == "__main__":
    main()
