"""
Prometheus-compatible metrics for observability.

Tracks customer lifecycle events:
- Registrations, updates and deletions
- Profile image uploads and upload failures
- Login attempts (by status)

Usage:
    from customer_api.lib.metrics import get_metrics_collector

    metrics = get_metrics_collector()
    metrics.increment_registrations()
    metrics.increment_logins(status="success")

    # Export for Prometheus
    prometheus_output = metrics.export_prometheus()
"""

from typing import Dict, Optional, Tuple
from threading import Lock


class MetricsCollector:
    """
    Prometheus-style metrics collector for the customer API.

    Counters:
    - customers_registered_total: Successful registrations
    - customers_updated_total: Successful profile updates
    - customers_deleted_total: Deleted customers
    - profile_images_uploaded_total: Stored profile images
    - profile_image_upload_failures_total: Uploads that failed on I/O
    - logins_total: Login attempts (labels: status)

    Thread-safe for concurrent increments.
    """

    def __init__(self):
        self._lock = Lock()

        # Counters: key = (metric_name, labels_tuple), value = count
        self._counters: Dict[Tuple[str, Tuple[Tuple[str, str], ...]], int] = {}

    def _get_counter_key(self, metric_name: str, labels: Dict[str, str]) -> Tuple[str, Tuple[Tuple[str, str], ...]]:
        """Generate unique key for counter with sorted labels."""
        sorted_labels = tuple(sorted(labels.items()))
        return (metric_name, sorted_labels)

    def _increment(self, metric_name: str, labels: Optional[Dict[str, str]] = None, amount: int = 1):
        """Thread-safe increment of counter."""
        key = self._get_counter_key(metric_name, labels or {})
        with self._lock:
            self._counters[key] = self._counters.get(key, 0) + amount

    def _get_value(self, metric_name: str, labels: Dict[str, str]) -> int:
        key = self._get_counter_key(metric_name, labels)
        with self._lock:
            return self._counters.get(key, 0)

    # ===== Customer Metrics =====

    def increment_registrations(self, amount: int = 1):
        self._increment("customers_registered_total", amount=amount)

    def increment_updates(self, amount: int = 1):
        self._increment("customers_updated_total", amount=amount)

    def increment_deletions(self, amount: int = 1):
        self._increment("customers_deleted_total", amount=amount)

    # ===== Profile Image Metrics =====

    def increment_uploads(self, amount: int = 1):
        self._increment("profile_images_uploaded_total", amount=amount)

    def increment_upload_failures(self, amount: int = 1):
        self._increment("profile_image_upload_failures_total", amount=amount)

    # ===== Authentication Metrics =====

    def increment_logins(self, status: str = "success", amount: int = 1):
        """
        Increment login attempts counter.

        Args:
            status: Outcome of the attempt (success, failure)
            amount: Increment amount
        """
        self._increment("logins_total", {"status": status.lower()}, amount)

    # ===== Export =====

    def export_prometheus(self) -> str:
        """
        Export all metrics in Prometheus text format.

        Returns:
            Prometheus-compatible text output
        """
        output_lines = []

        metrics_by_name: Dict[str, list] = {}
        with self._lock:
            for (metric_name, labels_tuple), value in self._counters.items():
                metrics_by_name.setdefault(metric_name, []).append((dict(labels_tuple), value))

        for metric_name in sorted(metrics_by_name.keys()):
            output_lines.append(f"# HELP {metric_name} {self._get_help_text(metric_name)}")
            output_lines.append(f"# TYPE {metric_name} counter")

            for labels_dict, value in sorted(metrics_by_name[metric_name], key=lambda x: str(x[0])):
                if labels_dict:
                    labels_str = ",".join([f'{k}="{v}"' for k, v in sorted(labels_dict.items())])
                    output_lines.append(f"{metric_name}{{{labels_str}}} {value}")
                else:
                    output_lines.append(f"{metric_name} {value}")

            output_lines.append("")  # Blank line between metrics

        return "\n".join(output_lines)

    def _get_help_text(self, metric_name: str) -> str:
        help_texts = {
            "customers_registered_total": "Total number of registered customers",
            "customers_updated_total": "Total number of customer updates",
            "customers_deleted_total": "Total number of deleted customers",
            "profile_images_uploaded_total": "Total number of stored profile images",
            "profile_image_upload_failures_total": "Total number of failed profile image uploads",
            "logins_total": "Total number of login attempts",
        }
        return help_texts.get(metric_name, "Counter metric")

    def get_counter_value(self, metric_name: str, labels: Optional[Dict[str, str]] = None) -> int:
        """Get current value of a specific counter."""
        return self._get_value(metric_name, labels or {})

    def reset_all(self):
        """Reset all counters (for testing)."""
        with self._lock:
            self._counters.clear()


# Global singleton instance
_metrics_collector: MetricsCollector | None = None
_metrics_lock = Lock()


def get_metrics_collector() -> MetricsCollector:
    """Get global metrics collector singleton."""
    global _metrics_collector
    if _metrics_collector is None:
        with _metrics_lock:
            if _metrics_collector is None:
                _metrics_collector = MetricsCollector()
    return _metrics_collector


def reset_metrics():
    """Reset global metrics collector (for testing)."""
    with _metrics_lock:
        if _metrics_collector is not None:
            _metrics_collector.reset_all()
