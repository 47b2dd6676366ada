"""
模块职责（领域服务：URL 解析与标准化）
- resolve: 把页面中的原始 href 结合基准上下文（<base href> 或页面自身URL）转换为绝对URL；
- canonicalize: 生成去重键（协议/主机小写，去掉结尾的 index 文档与斜杠）；
- is_same_host: 同站判断，两侧都忽略开头的 "www."。

设计要点
- 纯函数，无状态，可独立测试；
- 任何无法解析的结果都返回 None / 空字符串，调用方据此跳过，不抛异常。
"""

import posixpath
import re
from typing import Optional
from urllib.parse import urlparse, urlsplit


_IGNORED_SCHEMES = ('mailto:', 'javascript:', 'tel:')
_SCHEME_RE = re.compile(r'^[a-zA-Z][a-zA-Z0-9+.\-]*:')
_INDEX_DOCUMENT_RE = re.compile(r'/index\.(?:html?|php)$', re.IGNORECASE)
_DUPLICATE_SLASHES_RE = re.compile(r'/{2,}')


def resolve(href: Optional[str], base: str) -> Optional[str]:
    """
    将原始链接转换为绝对URL

    参数:
        href: <a href> 的原始值
        base: 基准上下文（<base href> 解析后的绝对URL，否则为页面URL）

    返回:
        绝对URL；空链接、mailto/javascript/tel、无法解析时返回 None
    """
    if href is None:
        return None

    # 去掉 fragment 后再去空白，"#top" 这类纯锚点变成空串
    href = href.split('#', 1)[0].strip()
    if not href or href.lower().startswith(_IGNORED_SCHEMES):
        return None

    # 已带协议：原样使用（去掉结尾斜杠），仅做语法校验
    if _SCHEME_RE.match(href) and not href.startswith('//'):
        try:
            parsed = urlparse(href)
        except ValueError:
            return None
        if not parsed.scheme or not parsed.netloc:
            return None
        return href.rstrip('/')

    try:
        base_parts = urlsplit(base)
    except (ValueError, TypeError):
        return None
    if not base_parts.scheme or not base_parts.netloc:
        return None

    scheme = base_parts.scheme
    netloc = base_parts.netloc

    # 协议相对链接：//cdn.example.com/a
    if href.startswith('//'):
        return resolve(f"{scheme}:{href}", base)

    path, query = _split_query(href)

    if path.startswith('/'):
        # 根相对路径
        full_path = path
    else:
        # 相对路径：拼接到基准路径所在目录
        base_dir = posixpath.dirname(base_parts.path or '/').rstrip('/')
        full_path = f"{base_dir}/{path}"

    full_path = _remove_dot_segments(_DUPLICATE_SLASHES_RE.sub('/', full_path))
    if path.startswith('/'):
        full_path = full_path.rstrip('/')

    result = f"{scheme}://{netloc}{full_path}"
    if query:
        result = f"{result}?{query}"

    try:
        urlparse(result)
    except ValueError:
        return None
    return result


def canonicalize(url: Optional[str]) -> str:
    """
    生成去重键

    处理:
        - 协议和主机小写
        - 去掉结尾的 /index.html、/index.htm、/index.php
        - 去掉结尾斜杠
        - 去掉 fragment，保留查询串

    返回:
        标准化URL；空或无法解析时返回空字符串（调用方必须跳过空结果）
    """
    if not isinstance(url, str) or not url.strip():
        return ''

    try:
        parsed = urlsplit(url.strip())
    except ValueError:
        return ''
    if not parsed.scheme or not parsed.netloc:
        return ''

    path = parsed.path
    # 循环处理，保证 canonicalize(canonicalize(u)) == canonicalize(u)
    while True:
        stripped = _INDEX_DOCUMENT_RE.sub('', path.rstrip()).rstrip('/')
        if stripped == path:
            break
        path = stripped

    canonical = f"{parsed.scheme.lower()}://{parsed.netloc.lower()}{path}"
    if parsed.query:
        canonical = f"{canonical}?{parsed.query}"
    return canonical


def host_of(url: str) -> str:
    """返回小写主机名，无法解析时返回空字符串"""
    try:
        return (urlparse(url).hostname or '').lower()
    except ValueError:
        return ''


def is_same_host(host_a: Optional[str], host_b: Optional[str]) -> bool:
    """同站判断：忽略任一侧开头的 www."""
    if not host_a or not host_b:
        return False
    return _strip_www(host_a.lower()) == _strip_www(host_b.lower())


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith('www.') else host


def _split_query(href: str) -> tuple[str, str]:
    if '?' in href:
        path, query = href.split('?', 1)
        return path, query
    return href, ''


def _remove_dot_segments(path: str) -> str:
    """处理 ./ 与 ../，不允许越过根目录"""
    if '/.' not in path:
        return path
    segments = []
    for segment in path.split('/'):
        if segment == '..':
            if len(segments) > 1:
                segments.pop()
        elif segment != '.':
            segments.append(segment)
    result = '/'.join(segments)
    return result if result.startswith('/') else '/' + result
