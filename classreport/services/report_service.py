"""
Report service: fetches fresh snapshots and runs the report engine on them.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..core.exceptions import ClassReportException
from ..core.interfaces import SnapshotProvider
from ..core.report import Report, ReportGenerator
from ..core.statistics import (
    ClassStatistics, aggregate_statistics, approval_rate, failure_rate
)

logger = logging.getLogger(__name__)


class ReportService:
    """Report generation over a snapshot provider. Nothing is cached."""

    def __init__(self, snapshots: SnapshotProvider, generator: Optional[ReportGenerator] = None):
        self._snapshots = snapshots
        self._generator = generator or ReportGenerator()

    def generate_report(self, class_id: str) -> Report:
        snapshot = self._snapshots.get_snapshot(class_id)
        try:
            report = self._generator.generate(snapshot)
        except ClassReportException as e:
            logger.warning("Report generation failed for %s: %s", class_id, e.message)
            raise
        logger.info("Report generated for %s (%d enrolled)", class_id, report.total_enrolled)
        return report

    def class_statistics(self, class_id: str) -> ClassStatistics:
        return ClassStatistics.from_report(self.generate_report(class_id))

    def compare_classes(self, class_ids: Sequence[str]) -> Dict[str, Any]:
        """Statistics rows for each class plus the enrollment-weighted aggregate."""
        rows: List[Dict[str, Any]] = []
        statistics: List[ClassStatistics] = []
        for class_id in class_ids:
            report = self.generate_report(class_id)
            stats = ClassStatistics.from_report(report)
            statistics.append(stats)
            rows.append({
                'classId': report.class_id,
                'topic': report.topic,
                'semester': report.semester,
                'year': report.year,
                'statistics': stats.to_dict(),
                'approvalRate': approval_rate(stats),
                'failureRate': failure_rate(stats),
            })

        aggregate = aggregate_statistics(statistics)
        return {
            'classes': rows,
            'aggregate': aggregate.to_dict(),
            'approvalRate': approval_rate(aggregate),
            'failureRate': failure_rate(aggregate),
        }
