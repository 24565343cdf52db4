"""AWS boto3 client for enumerating EC2 instance types."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError

from ..config import AWSConfig
from ..exceptions import CatalogFetchError
from . import PageHandler
from .models import InstanceTypeInfo

logger = logging.getLogger(__name__)


class AWSComputeCatalog:
    """Pages through EC2 DescribeInstanceTypes and hands each page to a callback."""

    def __init__(self, aws_config: AWSConfig):
        self._config = aws_config

        session_kwargs: dict[str, Any] = {}
        if aws_config.region:
            session_kwargs["region_name"] = aws_config.region
        if aws_config.credential_profile:
            session_kwargs["profile_name"] = aws_config.credential_profile

        try:
            session = boto3.Session(**session_kwargs)
            self._ec2 = session.client(
                "ec2",
                config=Config(
                    connect_timeout=aws_config.connect_timeout,
                    read_timeout=aws_config.read_timeout,
                    retries={"max_attempts": aws_config.max_attempts, "mode": "standard"},
                ),
            )
        except BotoCoreError as exc:
            # ProfileNotFound, or NoRegionError when no region is configured anywhere
            raise CatalogFetchError(f"unable to create EC2 client: {exc}", cause=exc) from exc

    def enumerate_instance_types(
        self,
        filters: Mapping[str, Sequence[str]],
        page_handler: PageHandler,
    ) -> None:
        paginate_kwargs: dict[str, Any] = {
            "Filters": [{"Name": name, "Values": list(values)} for name, values in filters.items()],
        }
        if self._config.page_size is not None:
            paginate_kwargs["PaginationConfig"] = {"PageSize": self._config.page_size}

        paginator = self._ec2.get_paginator("describe_instance_types")
        pages = 0
        for page in paginator.paginate(**paginate_kwargs):
            pages += 1
            descriptors = [self._parse(raw) for raw in page.get("InstanceTypes", [])]
            last_page = not page.get("NextToken")
            if not page_handler(descriptors, last_page):
                logger.debug("Page handler stopped enumeration after page %d", pages)
                break

        logger.debug("Enumerated instance types", extra={"pages": pages})

    @staticmethod
    def _parse(raw: dict[str, Any]) -> InstanceTypeInfo:
        try:
            return InstanceTypeInfo.from_api(raw)
        except KeyError as exc:
            raise CatalogFetchError("malformed DescribeInstanceTypes entry: missing InstanceType", cause=exc) from exc
