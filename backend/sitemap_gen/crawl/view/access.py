import hmac
import os
from typing import Optional

from dotenv import load_dotenv

from ..domain.exceptions import UnauthorizedError

# 访问密钥可以写在 backend/.env 中（SITEMAP_ACCESS_KEY=...），已存在的环境变量优先
backend_dir = os.path.dirname(os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))
load_dotenv(os.path.join(backend_dir, ".env"))

ACCESS_KEY_ENV = "SITEMAP_ACCESS_KEY"


def require_access_key(provided: Optional[str], expected: Optional[str] = None) -> None:
    """
    校验访问密钥，在任何爬取开始之前调用

    参数:
        provided: 调用方提供的 key
        expected: 期望的 key，默认读取环境变量 SITEMAP_ACCESS_KEY

    异常:
        UnauthorizedError: 未配置密钥、未提供或不匹配
    """
    if expected is None:
        expected = os.environ.get(ACCESS_KEY_ENV, "")

    if not expected or not provided:
        raise UnauthorizedError()
    if not hmac.compare_digest(str(provided).encode('utf-8'), expected.encode('utf-8')):
        raise UnauthorizedError()
