import os

from sitemap_gen import create_app
from sitemap_gen.shared.logging_config import setup_logging

# 初始化日志系统（运行日志由 sitemap_view 中的事件总线转发到这些 logger）
setup_logging(os.environ.get("SITEMAP_LOG_DIR"))

app = create_app()


if __name__ == '__main__':
    app.run(debug=True, port=5000)
