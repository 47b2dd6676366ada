"""
站点地图生成异常

只有两类异常会作为致命信号跨越组件边界：访问密钥校验失败与输出目录不可用。
其余问题（请求失败、robots/meta 拦截、配置文件缺失）都记录在运行日志中，不抛出。
"""


class SitemapGenError(Exception):
    """
    所有站点地图生成异常的基类

    Attributes:
        message: 错误描述信息
    """

    def __init__(self, message: str = "Sitemap generation failed"):
        self.message = message
        super().__init__(self.message)


class UnauthorizedError(SitemapGenError):
    """缺少访问密钥或密钥不匹配，在任何爬取开始之前抛出"""

    def __init__(self, message: str = "Unauthorized. Valid key parameter required."):
        super().__init__(message)


class OutputDirectoryError(SitemapGenError):
    """
    输出目录无法创建或写入

    Attributes:
        path: 出错的目录
    """

    def __init__(self, path: str, message: str = ""):
        self.path = path
        super().__init__(message or f"无法创建输出目录: {path}")


class InvalidStartUrlError(SitemapGenError):
    """起始URL缺少协议或主机名"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"无效的起始URL: {url}")


class RunInProgressError(SitemapGenError):
    """已有一次运行在后台执行，同一时间只允许一次运行"""

    def __init__(self, run_id: str):
        self.run_id = run_id
        super().__init__(f"已有运行正在执行: {run_id}")
