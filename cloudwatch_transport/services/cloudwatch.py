"""
CloudWatch Logs integration: log group/stream provisioning and event delivery
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from ..models.event import LogEvent

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
INITIAL_RETRY_DELAY = 1
MAX_RETRY_DELAY = 30

RETRYABLE_ERROR_CODES = {
    'Throttling',
    'ThrottlingException',
    'ServiceUnavailable',
    'ServiceUnavailableException',
}


def ensure_log_group_and_stream_exist(
    logs_client,
    log_group: str,
    log_stream: str,
    create_group: bool = True,
    create_stream: bool = True
) -> None:
    """
    Ensure log group and log stream exist, creating them if necessary
    """
    try:
        if create_group:
            groups = logs_client.describe_log_groups(logGroupNamePrefix=log_group)
            for group in groups['logGroups']:
                if group['logGroupName'] == log_group:
                    break
            else:
                logger.info(f"Creating log group: {log_group}")
                logs_client.create_log_group(logGroupName=log_group)

        if create_stream:
            streams = logs_client.describe_log_streams(
                logGroupName=log_group,
                logStreamNamePrefix=log_stream
            )
            for stream in streams['logStreams']:
                if stream['logStreamName'] == log_stream:
                    break
            else:
                logger.info(f"Creating log stream: {log_stream} in group: {log_group}")
                logs_client.create_log_stream(
                    logGroupName=log_group,
                    logStreamName=log_stream
                )

    except Exception as e:
        logger.error(f"Error ensuring log group/stream exist: {str(e)}")
        raise


def count_rejected_events(rejected_info: Dict[str, Any], batch_size: int) -> int:
    """Number of events CloudWatch refused, from a rejectedLogEventsInfo block"""
    rejected_count = 0
    if rejected_info.get('tooNewLogEventStartIndex') is not None:
        logger.warning(f"Some events were too new: {rejected_info}")
        rejected_count += batch_size - rejected_info['tooNewLogEventStartIndex']
    if rejected_info.get('tooOldLogEventEndIndex') is not None:
        logger.warning(f"Some events were too old: {rejected_info}")
        rejected_count += rejected_info['tooOldLogEventEndIndex'] + 1
    if rejected_info.get('expiredLogEventEndIndex') is not None:
        logger.warning(f"Some events were expired: {rejected_info}")
        rejected_count += rejected_info['expiredLogEventEndIndex'] + 1
    return min(rejected_count, batch_size)


def put_events(
    logs_client,
    log_group: str,
    log_stream: str,
    events: List[LogEvent]
) -> Dict[str, int]:
    """
    Send one batch with PutLogEvents, retrying throttling with exponential backoff

    Returns:
        Dictionary with 'successful_events' and 'failed_events' counts

    Raises:
        ClientError: For non-retryable errors, or once retries are exhausted
    """
    log_events = [event.to_cloudwatch() for event in events]
    retry_delay = INITIAL_RETRY_DELAY

    attempt = 0
    while True:
        attempt += 1
        try:
            response = logs_client.put_log_events(
                logGroupName=log_group,
                logStreamName=log_stream,
                logEvents=log_events
            )

            rejected_count = count_rejected_events(
                response.get('rejectedLogEventsInfo') or {}, len(log_events)
            )
            successful = len(log_events) - rejected_count
            logger.debug(f"Sent batch to {log_group}/{log_stream}: {successful} successful, {rejected_count} rejected")

            return {
                'successful_events': successful,
                'failed_events': rejected_count
            }

        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')

            if attempt >= MAX_RETRIES:
                logger.error(f"Failed after {MAX_RETRIES} attempts: {error_code}: {e}")
                raise

            if error_code in RETRYABLE_ERROR_CODES:
                logger.warning(f"Throttled/unavailable, retrying in {retry_delay}s (attempt {attempt}/{MAX_RETRIES})")
                time.sleep(retry_delay)
                retry_delay = min(retry_delay * 2, MAX_RETRY_DELAY)
                continue

            if error_code == 'InvalidSequenceTokenException':
                # Sequence tokens are ignored by current AWS endpoints
                logger.warning("Invalid sequence token, retrying without token")
                continue

            logger.error(f"CloudWatch API error: {error_code}: {e}")
            raise


class CloudWatchIntegration:
    """
    Remote sink used by the batch uploader

    Provisions the log group and stream once per (client, group, stream) and
    then delivers each batch with put_events(). upload() reports the outcome
    through its callback exactly once.
    """

    def __init__(self, create_log_group: bool = True, create_log_stream: bool = True):
        self.create_log_group = create_log_group
        self.create_log_stream = create_log_stream
        self._ready = set()
        self._lock = threading.Lock()

    def ensure_destination(self, logs_client, log_group: str, log_stream: str) -> None:
        key = (id(logs_client), log_group, log_stream)
        with self._lock:
            if key in self._ready:
                return
            ensure_log_group_and_stream_exist(
                logs_client,
                log_group,
                log_stream,
                create_group=self.create_log_group,
                create_stream=self.create_log_stream
            )
            self._ready.add(key)

    def upload(
        self,
        logs_client,
        log_group: str,
        log_stream: str,
        events: List[LogEvent],
        callback: Callable[[Optional[Exception]], None]
    ) -> None:
        """
        Deliver events to log_group/log_stream

        Args:
            logs_client: boto3 CloudWatch Logs client
            log_group: Target log group name
            log_stream: Target log stream name
            events: Events in the order they should be delivered
            callback: Called once with None on success or the error on failure
        """
        error = None
        try:
            self.ensure_destination(logs_client, log_group, log_stream)
            stats = put_events(logs_client, log_group, log_stream, events)
            if stats['failed_events']:
                logger.warning(f"CloudWatch rejected {stats['failed_events']} of {len(events)} events")
        except Exception as e:
            error = e
        callback(error)
