from abc import ABC, abstractmethod

from analysis.domain.analysis_record import AnalysisRecord


class AnalysisRepositoryPort(ABC):
    @abstractmethod
    def save(self, record: AnalysisRecord) -> AnalysisRecord:
        raise NotImplementedError

    # 조회 전용 메서드들
    @abstractmethod
    def find_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        raise NotImplementedError

    @abstractmethod
    def list_recent(self, video_id: str | None = None, limit: int = 20) -> list[AnalysisRecord]:
        raise NotImplementedError
