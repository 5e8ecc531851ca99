"""
Pydantic model for transport configuration validation
"""

import os
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Upper bound on events per PutLogEvents call
MAX_EVENTS_PER_PUT = 10000

DEFAULT_LOG_GROUP = 'default-log-group'
DEFAULT_LOG_STREAM = 'default-log-stream'
DEFAULT_FLUSH_INTERVAL = 2.0
DEFAULT_MAX_BATCH_SIZE = 20

# Keys that are spelled differently by callers than by boto3.client()
AWS_OPTION_ALIASES = {
    'region': 'region_name',
    'endpoint': 'endpoint_url',
    'access_key_id': 'aws_access_key_id',
    'secret_access_key': 'aws_secret_access_key',
    'session_token': 'aws_session_token',
}


def validate_aws_region(region: Optional[str]) -> Optional[str]:
    """Shared validator for AWS region format"""
    if region is not None and not region.replace('-', '').isalnum():
        raise ValueError('Region must be a valid AWS region')
    return region


def normalize_aws_options(options: Dict[str, Any]) -> Dict[str, Any]:
    """Rename alias keys to the keyword arguments boto3.client() accepts"""
    normalized = {}
    for key, value in options.items():
        normalized[AWS_OPTION_ALIASES.get(key, key)] = value
    return normalized


class TransportConfig(BaseModel):
    """Construction-time configuration of a CloudWatch transport"""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    log_group_name: str = Field(
        default_factory=lambda: os.environ.get('CLOUDWATCH_LOG_GROUP', DEFAULT_LOG_GROUP),
        min_length=1, max_length=512, description="CloudWatch Logs group name"
    )
    log_stream_name: str = Field(
        default_factory=lambda: os.environ.get('CLOUDWATCH_LOG_STREAM', DEFAULT_LOG_STREAM),
        min_length=1, max_length=512, description="CloudWatch Logs stream name"
    )
    region: Optional[str] = Field(default=None, description="Shorthand for aws_options['region_name']")
    aws_access_key_id: Optional[str] = Field(default=None, description="Shorthand access key")
    aws_secret_access_key: Optional[str] = Field(default=None, description="Shorthand secret key")
    aws_session_token: Optional[str] = Field(default=None, description="Shorthand session token")
    aws_options: Dict[str, Any] = Field(default_factory=dict, description="Extra boto3.client keyword arguments")
    json_message: bool = Field(default=False, description="Render messages as JSON objects")
    message_formatter: Optional[Callable[..., str]] = Field(default=None, description="Custom record formatter")
    error_handler: Optional[Callable[[Any], Any]] = Field(default=None, description="Called with each upload error")
    flush_interval: float = Field(
        default_factory=lambda: float(os.environ.get('CLOUDWATCH_FLUSH_INTERVAL', DEFAULT_FLUSH_INTERVAL)),
        gt=0, description="Seconds between flushes"
    )
    max_batch_size: int = Field(
        default_factory=lambda: int(os.environ.get('CLOUDWATCH_MAX_BATCH_SIZE', DEFAULT_MAX_BATCH_SIZE)),
        ge=1, le=MAX_EVENTS_PER_PUT, description="Maximum events per upload"
    )
    create_log_group: bool = Field(default=True, description="Create the log group when missing")
    create_log_stream: bool = Field(default=True, description="Create the log stream when missing")

    @field_validator('region')
    @classmethod
    def validate_region(cls, v):
        """Validate AWS region format"""
        return validate_aws_region(v)

    @field_validator('aws_options')
    @classmethod
    def validate_aws_options(cls, v):
        """Normalize alias keys and validate a nested region"""
        v = normalize_aws_options(v)
        validate_aws_region(v.get('region_name'))
        return v

    def client_options(self) -> Dict[str, Any]:
        """
        Keyword arguments for the CloudWatch Logs client

        Top-level shorthand fields are applied first and aws_options
        overwrites any overlapping keys.
        """
        options: Dict[str, Any] = {}
        region = self.region or os.environ.get('AWS_REGION')
        if region:
            options['region_name'] = region
        if self.aws_access_key_id:
            options['aws_access_key_id'] = self.aws_access_key_id
        if self.aws_secret_access_key:
            options['aws_secret_access_key'] = self.aws_secret_access_key
        if self.aws_session_token:
            options['aws_session_token'] = self.aws_session_token

        options.update(self.aws_options)
        return options
