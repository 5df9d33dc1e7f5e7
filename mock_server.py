"""Run the storefront against moto-mocked AWS services.

    python mock_server.py

All data lives in memory and is lost when the server stops.
"""
import logging
import os

import boto3
from moto import mock_aws

import config
import store

logger = logging.getLogger(__name__)

# (table name, partition key)
TABLES = [
    (config.USERS_TABLE, 'email'),
    (config.CATEGORIES_TABLE, 'slug'),
    (config.PRODUCTS_TABLE, 'id'),
    (config.ORDERS_TABLE, 'id'),
    (config.GIFT_TIERS_TABLE, 'id'),
    (config.VENDORS_TABLE, 'id'),
]


def fake_credentials():
    # must be set before any boto3 client is created
    os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
    os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
    os.environ['AWS_SECURITY_TOKEN'] = 'testing'
    os.environ['AWS_SESSION_TOKEN'] = 'testing'
    os.environ['AWS_DEFAULT_REGION'] = config.REGION


def setup_infrastructure():
    """Create the tables, the image bucket and the notification topic.

    Must run inside an active moto mock. Returns the topic ARN, which is
    also stored on ``config`` so notifications are published.
    """
    logger.info("Creating mocked AWS resources (DynamoDB tables, S3, SNS)")
    store.reset_connections()

    dynamodb = boto3.resource('dynamodb', region_name=config.REGION)
    for name, key in TABLES:
        dynamodb.create_table(
            TableName=name,
            KeySchema=[{'AttributeName': key, 'KeyType': 'HASH'}],
            AttributeDefinitions=[{'AttributeName': key, 'AttributeType': 'S'}],
            ProvisionedThroughput={'ReadCapacityUnits': 5, 'WriteCapacityUnits': 5}
        )

    s3 = boto3.client('s3', region_name=config.REGION)
    if config.REGION == 'us-east-1':
        s3.create_bucket(Bucket=config.IMAGES_BUCKET)
    else:
        s3.create_bucket(Bucket=config.IMAGES_BUCKET,
                         CreateBucketConfiguration={'LocationConstraint': config.REGION})

    sns = boto3.client('sns', region_name=config.REGION)
    response = sns.create_topic(Name='giftcenter_topic')
    config.SNS_TOPIC_ARN = response['TopicArn']

    logger.info("Mock environment ready. SNS topic ARN: %s", config.SNS_TOPIC_ARN)
    return config.SNS_TOPIC_ARN


if __name__ == '__main__':
    fake_credentials()
    mock = mock_aws()
    mock.start()

    # import after moto starts so the app's boto3 handles are intercepted
    from app import app

    try:
        setup_infrastructure()
        store.seed_categories()
        logger.info("Starting Flask server at http://localhost:5000")
        # use_reloader=False prevents spawning a new process that loses mock state
        app.run(host='0.0.0.0', port=5000, debug=True, use_reloader=False)
    finally:
        mock.stop()
