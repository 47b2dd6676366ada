from abc import ABC, abstractmethod


class IReportMailer(ABC):
    """
    运行报告邮件投递接口
    MIME 组装与实际投递由外部协作方实现，这里只定义边界
    """

    @abstractmethod
    def send_report(self, recipient: str, subject: str, body: str) -> None:
        pass
