"""
Test configuration and fixtures for unit tests
"""
import os
from unittest.mock import Mock

import pytest
import boto3
from moto import mock_aws

from cloudwatch_transport import CloudWatchTransport
from tests.utils.upload_stubs import RecordingUpload


@pytest.fixture
def aws_credentials():
    """Mocked AWS Credentials for moto."""
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'


@pytest.fixture
def mock_aws_services(aws_credentials):
    """Mock all AWS services."""
    with mock_aws():
        yield


@pytest.fixture
def logs_client(mock_aws_services):
    """CloudWatch Logs client backed by moto"""
    return boto3.client('logs', region_name='us-east-1')


@pytest.fixture
def environment_variables():
    """Set up test environment variables."""
    test_env = {
        'AWS_REGION': 'us-east-1',
        'CLOUDWATCH_LOG_GROUP': 'test-group',
        'CLOUDWATCH_LOG_STREAM': 'test-stream',
        'CLOUDWATCH_FLUSH_INTERVAL': '2',
        'CLOUDWATCH_MAX_BATCH_SIZE': '20'
    }

    # Store original values
    original_env = {}
    for key, value in test_env.items():
        original_env[key] = os.environ.get(key)
        os.environ[key] = value

    yield test_env

    # Restore original values
    for key, value in original_env.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value


@pytest.fixture
def recording_upload():
    """Upload stub that always succeeds"""
    return RecordingUpload()


@pytest.fixture
def failing_upload():
    """Upload stub that always fails with 'ERROR'"""
    return RecordingUpload(error='ERROR')


@pytest.fixture
def client_factory():
    """Mock boto3.client replacement returning a mock logs client"""
    factory = Mock()
    factory.return_value = Mock(name='logs_client')
    return factory


@pytest.fixture
def make_transport(client_factory):
    """Build transports with a mocked client and no background timer; closes them afterwards"""
    transports = []

    def _make(upload, **options):
        options.setdefault('autostart', False)
        transport = CloudWatchTransport(upload=upload, client_factory=client_factory, **options)
        transports.append(transport)
        return transport

    yield _make

    for transport in transports:
        transport.close()
