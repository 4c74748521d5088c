"""
Utility functions for exporting analytics to CSV format.
Used by job seekers to download their complete analytics report.
"""

import csv
import io
from typing import Dict, List

from app.schemas.analytics import CompleteAnalytics, ConversionRates

FIELDNAMES = ['Section', 'Metric', 'Value']


def _conversion_rows(section: str, rates: ConversionRates) -> List[Dict[str, object]]:
    return [
        {'Section': section, 'Metric': 'Application to Phone Screen (%)', 'Value': rates.application_to_phone_screen},
        {'Section': section, 'Metric': 'Phone Screen to Technical (%)', 'Value': rates.phone_screen_to_technical},
        {'Section': section, 'Metric': 'Technical to Onsite (%)', 'Value': rates.technical_to_onsite},
        {'Section': section, 'Metric': 'Onsite to Offer (%)', 'Value': rates.onsite_to_offer},
        {'Section': section, 'Metric': 'Offer to Accepted (%)', 'Value': rates.offer_to_accepted},
        {'Section': section, 'Metric': 'Overall Application to Offer (%)', 'Value': rates.overall_application_to_offer},
    ]


def export_complete_analytics_to_csv(analytics: CompleteAnalytics) -> str:
    """
    Export the complete analytics report to CSV format.

    Args:
        analytics: Complete analytics for one user

    Returns:
        CSV string ready to be downloaded
    """

    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=FIELDNAMES)
    writer.writeheader()

    # Report metadata
    writer.writerow({'Section': 'Report', 'Metric': 'Generated At', 'Value': analytics.generated_at.strftime('%Y-%m-%d %H:%M:%S')})
    writer.writerow({'Section': 'Report', 'Metric': 'Start Date', 'Value': analytics.date_range.start_date.isoformat()})
    writer.writerow({'Section': 'Report', 'Metric': 'End Date', 'Value': analytics.date_range.end_date.isoformat()})

    # Pipeline
    summary = analytics.pipeline.summary
    writer.writerow({'Section': 'Pipeline', 'Metric': 'Total Applications', 'Value': summary.total_applications})
    writer.writerow({'Section': 'Pipeline', 'Metric': 'Active Applications', 'Value': summary.active_applications})
    writer.writerow({'Section': 'Pipeline', 'Metric': 'Completed Applications', 'Value': summary.completed_applications})
    writer.writerow({'Section': 'Pipeline', 'Metric': 'Recent Activity (7 days)', 'Value': summary.recent_activity_count})
    writer.writerow({'Section': 'Pipeline', 'Metric': 'Average Days in Pipeline', 'Value': summary.average_time_in_pipeline})
    for entry in analytics.pipeline.status_distribution:
        writer.writerow({'Section': 'Status Distribution', 'Metric': entry.status.value, 'Value': f"{entry.count} ({entry.percentage}%)"})

    # Conversion
    writer.writerows(_conversion_rows('Conversion', analytics.conversion.overall_conversion))
    for opportunity in analytics.conversion.summary.improvement_opportunities:
        writer.writerow({'Section': 'Conversion', 'Metric': 'Improvement Opportunity', 'Value': opportunity})

    # Resumes
    for metrics in analytics.resume_performance.resume_metrics:
        writer.writerow({'Section': f"Resume: {metrics.version_name}", 'Metric': 'Usage Count', 'Value': metrics.usage_count})
        writer.writerow({'Section': f"Resume: {metrics.version_name}", 'Metric': 'Success Rate (%)', 'Value': metrics.success_rate})

    # Timeline
    velocity = analytics.timeline.velocity_metrics
    timeline = analytics.timeline.summary
    writer.writerow({'Section': 'Timeline', 'Metric': 'Applications per Week', 'Value': velocity.applications_per_week})
    writer.writerow({'Section': 'Timeline', 'Metric': 'Applications per Month', 'Value': velocity.applications_per_month})
    writer.writerow({'Section': 'Timeline', 'Metric': 'Total Timespan (days)', 'Value': timeline.total_timespan_days})
    writer.writerow({'Section': 'Timeline', 'Metric': 'Most Active Month', 'Value': timeline.most_active_month})
    writer.writerow({'Section': 'Timeline', 'Metric': 'Least Active Month', 'Value': timeline.least_active_month})

    csv_string = output.getvalue()
    output.close()

    return csv_string


def create_csv_response_headers(filename: str) -> Dict[str, str]:
    """
    Create headers for CSV file download response.

    Args:
        filename: Name of the CSV file (without .csv extension)

    Returns:
        Dictionary of headers for FastAPI Response
    """

    return {
        "Content-Disposition": f"attachment; filename={filename}.csv",
        "Content-Type": "text/csv"
    }
