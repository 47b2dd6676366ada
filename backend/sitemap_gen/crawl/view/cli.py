"""
命令行入口

    sitemap-gen --url=https://example.com,https://example.org --key=SECRET [选项]

访问密钥与 SITEMAP_ACCESS_KEY 环境变量比对，不匹配时在爬取开始前以退出码 1 结束。
"""

import argparse
import logging
import sys
from typing import List, Optional

from ..domain.exceptions import SitemapGenError, UnauthorizedError
from ..domain.value_objects.crawl_config import CrawlConfig
from .access import require_access_key
from .composition_root import build_event_pipeline, build_run_service
from sitemap_gen.shared.logging_config import setup_logging


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sitemap-gen",
        description="爬取一个或多个域名并生成 XML 站点地图"
    )
    parser.add_argument("--url", help="起始URL，多个域名用逗号分隔")
    parser.add_argument("--key", help="访问密钥")
    parser.add_argument("--depth", type=int, help="最大爬取深度 (默认 3)")
    parser.add_argument("--threads", type=int, help="每批并发请求数 (默认 10)")
    parser.add_argument("--agent", help="User-Agent (默认 SitemapGenerator)")
    parser.add_argument("--output", help="站点地图输出路径 (默认 sitemap.xml)")
    parser.add_argument("--timeout", type=int, help="请求超时秒数 (默认 15)")
    parser.add_argument("--email", help="运行报告收件地址")
    parser.add_argument("--baseurl", help="站点地图对外访问的根URL（用于索引与 ping）")
    parser.add_argument("--cachedir", help="已访问缓存目录 (默认 cache)")
    parser.add_argument("--logdir", help="日志与报告目录 (默认 logs)")
    parser.add_argument("--filterconfig", help="过滤配置 JSON (默认 filter_config.json)")
    parser.add_argument(
        "--crawldelaypolicy", choices=["serialize", "ratelimit"],
        help="Crawl-delay 执行方式 (默认 serialize)"
    )

    for flag, help_text in (
        ("gzip", "输出 gzip 压缩的站点地图"),
        ("prettyxml", "输出缩进的 XML"),
        ("resume", "从已访问缓存继续"),
        ("resetcache", "开始前清空已访问缓存"),
        ("ignoremeta", "忽略 meta robots 指令"),
        ("allowfiles", "不跳过图片、文档、压缩包等文件链接"),
        ("filters", "启用排除/仅包含规则"),
        ("priorityrules", "启用优先级规则"),
        ("changefreqrules", "启用更新频率规则"),
        ("splitbysite", "每个域名单独生成站点地图"),
        ("ping", "生成后通知搜索引擎"),
        ("debug", "输出调试日志"),
    ):
        parser.add_argument(f"--{flag}", action="store_true", help=help_text)

    parser.add_argument(
        "--respectrobots", action=argparse.BooleanOptionalAction, default=None,
        help="遵守 robots.txt (默认开启)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # 1. 授权：任何爬取之前
    try:
        require_access_key(args.key)
    except UnauthorizedError as e:
        print(e.message, file=sys.stderr)
        return 1

    options = {name: value for name, value in vars(args).items() if name != "key"}
    config = CrawlConfig.from_options(options)
    if not config.domains:
        print("Missing required --url parameter.", file=sys.stderr)
        return 1

    # 2. 组装并执行
    setup_logging(config.log_dir, debug=config.debug)
    event_bus, run_log = build_event_pipeline(include_debug=config.debug)
    service = build_run_service(config, event_bus, run_log)

    try:
        summary = service.run()
    except SitemapGenError as e:
        logger.error(f"运行失败: {e.message}")
        print(e.message, file=sys.stderr)
        return 1

    print(f"Sitemap created with {summary.url_count} URLs: {', '.join(summary.sitemap_paths)}")
    if summary.index_path:
        print(f"Sitemap index: {summary.index_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
