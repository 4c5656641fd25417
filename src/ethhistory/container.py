from dependency_injector import containers, providers

from ethhistory.config import Settings
from ethhistory.export.driver import ExportDriver
from ethhistory.export.fees import FeeResolver
from ethhistory.export.processor import DirectionProcessor
from ethhistory.infra.blockchain.evm.alchemy_client import AlchemyClient
from ethhistory.infra.http.backoff import BackoffExecutor, BackoffPolicy
from ethhistory.infra.http.rate_limited_client import RateLimitedClient


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.rate_per_second,
        timeout=settings.provided.http_timeout,
        max_connections=settings.provided.fee_concurrency,
    )

    alchemy = providers.Singleton(
        AlchemyClient,
        url=settings.provided.alchemy_url,
        http_client=http_client,
    )

    backoff = providers.Singleton(
        BackoffExecutor,
        policy=providers.Factory(BackoffPolicy.from_settings, settings),
    )

    fee_resolver = providers.Factory(
        FeeResolver,
        client=alchemy,
        backoff=backoff,
        concurrency=settings.provided.fee_concurrency,
    )

    processor = providers.Factory(
        DirectionProcessor,
        client=alchemy,
        backoff=backoff,
        fee_resolver=fee_resolver,
        from_block=settings.provided.from_block,
        to_block=settings.provided.to_block,
        page_size=settings.provided.page_size,
        page_delay=settings.provided.page_delay,
    )

    driver = providers.Factory(
        ExportDriver,
        processor=processor,
        dedup_capacity=settings.provided.dedup_capacity,
        include_fee_status=settings.provided.include_fee_status,
    )
