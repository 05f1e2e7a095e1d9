#!/usr/bin/env python
"""Run the REST API with auto reload for local development."""

import os
import sys
from pathlib import Path

from spider_boxes.config import Config
from spider_boxes.log import setup as setup_log


def main():
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.toml"

    if Path(config_path).exists():
        config = Config.load_from_file(config_path)
    else:
        print(f"Configuration file not found: {config_path}, using defaults")
        config = Config()

    setup_log(config.log_file, config.log_level)

    host = config.web.host
    port = config.web.port
    print(f"Starting API server on http://{host}:{port}/api/v1 ({config.storage.backend.value} storage)")
    print("Press Ctrl+C to stop")

    os.environ["CONFIG_FILE"] = config_path

    import uvicorn

    uvicorn.run(
        "spider_boxes.api:create_app",
        host=host,
        port=port,
        factory=True,
        reload=True,
        reload_dirs=[str(Path(__file__).parent / "src")],
    )


if __name__ == "__main__":
    main()
