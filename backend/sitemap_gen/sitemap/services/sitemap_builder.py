"""
模块职责（站点地图生成）
- 把最终的已访问集合转换为 SitemapEntry（loc/lastmod/changefreq/priority）；
- 按每个文件最多 50,000 条分块，多于一块时文件名追加 -N；
- 渲染为紧凑或缩进的 XML，可选 gzip；
- 多于一个文件时（分块或按站点拆分）生成 sitemap index。
"""

import gzip
import xml.etree.ElementTree as ET
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from sitemap_gen.crawl.domain.domain_service.rule_engine import RuleEngine
from sitemap_gen.crawl.domain.exceptions import OutputDirectoryError
from ..domain.value_objects.sitemap_entry import SitemapEntry, SitemapFile


SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
MAX_URLS_PER_SITEMAP = 50000


class SitemapBuilder:
    """站点地图与站点地图索引的生成器"""

    def __init__(
        self,
        rule_engine: Optional[RuleEngine] = None,
        pretty: bool = False,
        use_gzip: bool = False,
        lastmod: Optional[date] = None,
        max_urls_per_file: int = MAX_URLS_PER_SITEMAP
    ):
        """
        参数:
            rule_engine: 计算 changefreq/priority；规则关闭时为默认 weekly/0.5
            pretty: 是否输出缩进的 XML
            use_gzip: 是否写出 .gz
            lastmod: 本次运行日期，默认今天
            max_urls_per_file: 单个文件最多条目数（协议上限 50,000）
        """
        self._rules = rule_engine or RuleEngine()
        self._pretty = pretty
        self._use_gzip = use_gzip
        self._lastmod = lastmod or date.today()
        self._max_urls = max(1, min(max_urls_per_file, MAX_URLS_PER_SITEMAP))

# -------------------- 条目与分块 --------------------

    def build_entries(self, visited: Dict[str, bool]) -> List[SitemapEntry]:
        """只包含可进入站点地图的URL（被 robots/meta 拦截的值为 False）"""
        return [
            SitemapEntry(
                loc=url,
                lastmod=self._lastmod,
                changefreq=self._rules.changefreq_of(url),
                priority=self._rules.priority_of(url)
            )
            for url, indexable in visited.items()
            if url and indexable
        ]

    def chunk(self, entries: Sequence[SitemapEntry]) -> List[List[SitemapEntry]]:
        if not entries:
            return [[]]
        return [list(entries[i:i + self._max_urls]) for i in range(0, len(entries), self._max_urls)]

# -------------------- 渲染 --------------------

    def render_urlset(self, entries: Iterable[SitemapEntry]) -> bytes:
        root = ET.Element("urlset", xmlns=SITEMAP_NS)
        for entry in entries:
            url_node = ET.SubElement(root, "url")
            ET.SubElement(url_node, "loc").text = entry.loc
            ET.SubElement(url_node, "lastmod").text = entry.lastmod.isoformat()
            ET.SubElement(url_node, "changefreq").text = entry.changefreq
            ET.SubElement(url_node, "priority").text = entry.priority
        return self._to_bytes(root)

    def render_index(self, sitemaps: Iterable[Tuple[str, date]]) -> bytes:
        """
        参数:
            sitemaps: [(站点地图的公开URL, 最后修改日期)]
        """
        root = ET.Element("sitemapindex", xmlns=SITEMAP_NS)
        for loc, lastmod in sitemaps:
            sitemap_node = ET.SubElement(root, "sitemap")
            ET.SubElement(sitemap_node, "loc").text = loc
            ET.SubElement(sitemap_node, "lastmod").text = lastmod.isoformat()
        return self._to_bytes(root)

    def _to_bytes(self, root: ET.Element) -> bytes:
        if self._pretty:
            ET.indent(root, space="  ")
        return ET.tostring(root, encoding="utf-8", xml_declaration=True)

# -------------------- 写出 --------------------

    def write(self, visited: Dict[str, bool], output_path: Union[str, Path]) -> List[SitemapFile]:
        """
        写出一个已访问集合对应的站点地图文件

        返回:
            实际写出的文件列表（分块时多于一个）
        """
        output_path = Path(output_path)
        self.ensure_directory(output_path.parent)

        chunks = self.chunk(self.build_entries(visited))
        files = []
        for number, entries in enumerate(chunks, start=1):
            path = output_path if len(chunks) == 1 else self.chunk_path(output_path, number)
            written = self._write_bytes(path, self.render_urlset(entries))
            files.append(SitemapFile(path=str(written), url_count=len(entries), lastmod=self._lastmod))
        return files

    def write_index(
        self,
        files: Sequence[SitemapFile],
        index_path: Union[str, Path],
        base_url: str,
        root_dir: Union[str, Path]
    ) -> SitemapFile:
        """
        写出 sitemap index，引用每个已生成文件的公开URL与最后修改日期

        参数:
            files: 已写出的站点地图文件
            index_path: 索引文件路径
            base_url: 站点地图对外访问的根URL
            root_dir: 与 base_url 对应的本地目录
        """
        index_path = Path(index_path)
        self.ensure_directory(index_path.parent)

        refs = [(self.public_url(f.path, base_url, root_dir), f.lastmod) for f in files]
        written = self._write_bytes(index_path, self.render_index(refs))
        return SitemapFile(path=str(written), url_count=len(files), lastmod=self._lastmod)

    def _write_bytes(self, path: Path, data: bytes) -> Path:
        if self._use_gzip:
            path = path.with_name(path.name + '.gz')
            data = gzip.compress(data)
        try:
            path.write_bytes(data)
        except OSError as e:
            raise OutputDirectoryError(str(path.parent), f"站点地图写入失败: {path} - {str(e)}") from e
        return path

    @staticmethod
    def chunk_path(output_path: Path, number: int) -> Path:
        return output_path.with_name(f"{output_path.stem}-{number}{output_path.suffix}")

    @staticmethod
    def ensure_directory(directory: Union[str, Path]) -> None:
        try:
            Path(directory).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(str(directory)) from e

    @staticmethod
    def public_url(path: Union[str, Path], base_url: str, root_dir: Union[str, Path]) -> str:
        path = Path(path)
        try:
            relative = path.resolve().relative_to(Path(root_dir).resolve()).as_posix()
        except ValueError:
            relative = path.name
        return f"{base_url.rstrip('/')}/{relative}"
