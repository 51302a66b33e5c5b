"""PR and workflow-run aggregation over the GitHub API."""

from monitor.aggregator import PRAggregator
from monitor.workflows import StandaloneWorkflowCollector

__all__ = ["PRAggregator", "StandaloneWorkflowCollector"]
