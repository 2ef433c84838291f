from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any, Awaitable, Callable, Sequence

from .assembler import AssemblyContext, PageAssembler
from .business_repository import BusinessContextProvider
from .catalog import DEFAULT_CATALOG, SHARED_COMPONENT_TYPES, ComponentCatalog
from .classifier import classify
from .composer import compose
from .config import EngineSettings
from .errors import GenerationCancelled, InvalidRequest, PageAssemblyFailure
from .generative import GenerativeService
from .industries import DEFAULT_KNOWLEDGE_BASE, IndustryKnowledgeBase
from .logging_config import get_trace_id, trace_scope
from .models.architecture import PagePlan, SiteArchitecture
from .models.bundle import GeneratedComponent, GeneratedPage, WebsiteBundle
from .models.business import BusinessDataContext
from .models.request import GenerationRequest
from .planner import ArchitecturePlanner, normalize_slug
from .progress import GenerationProgress, GenerationStage, ProgressCallback
from .shared_elements import SharedElementGenerator

logger = logging.getLogger(__name__)


def validate_request(request: GenerationRequest, catalog: ComponentCatalog = DEFAULT_CATALOG) -> None:
    """Raise ``InvalidRequest`` listing every problem with the request."""
    problems: list[str] = []
    constraints = request.constraints
    if not request.prompt.strip():
        problems.append("prompt must not be blank")
    if constraints.max_pages is not None:
        if constraints.max_pages < 1:
            problems.append("max_pages must be at least 1")
        elif len({normalize_slug(page) for page in constraints.required_pages}) > constraints.max_pages:
            problems.append("required_pages exceed max_pages")
    conflicting = sorted(set(constraints.exclude_components) & set(constraints.force_components))
    if conflicting:
        problems.append(f"components both excluded and forced: {', '.join(conflicting)}")
    if catalog.fallback_type and catalog.fallback_type in constraints.exclude_components:
        problems.append(f"fallback component {catalog.fallback_type} cannot be excluded")
    unknown = [
        component_type
        for component_type in constraints.force_components
        if component_type not in catalog or component_type in SHARED_COMPONENT_TYPES
    ]
    if unknown:
        problems.append(f"unknown component types in force_components: {', '.join(unknown)}")
    if problems:
        raise InvalidRequest(problems)


class WebsiteDesignerEngine:
    def __init__(
        self,
        service: GenerativeService,
        *,
        catalog: ComponentCatalog = DEFAULT_CATALOG,
        knowledge_base: IndustryKnowledgeBase = DEFAULT_KNOWLEDGE_BASE,
        business_provider: BusinessContextProvider | None = None,
        settings: EngineSettings | None = None,
    ) -> None:
        self._catalog = catalog
        self._knowledge_base = knowledge_base
        self._business_provider = business_provider
        self._settings = settings or EngineSettings()
        self._planner = ArchitecturePlanner(service, catalog=catalog, settings=self._settings)
        self._assembler = PageAssembler(service, catalog=catalog, settings=self._settings)
        self._shared = SharedElementGenerator(service, catalog=catalog, settings=self._settings)

    async def generate_website(
        self,
        request: GenerationRequest,
        *,
        business_context: BusinessDataContext | None = None,
        cancel_event: asyncio.Event | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> WebsiteBundle:
        """Build a complete site bundle for ``request``.

        ``on_progress`` is called synchronously when each stage starts and
        after each page finishes. Errors it raises propagate.
        """
        generation_id = uuid.uuid4().hex
        with trace_scope(get_trace_id() or generation_id):
            return await self._generate(request, business_context, cancel_event, on_progress, generation_id)

    async def _generate(
        self,
        request: GenerationRequest,
        business_context: BusinessDataContext | None,
        cancel_event: asyncio.Event | None,
        on_progress: ProgressCallback | None,
        generation_id: str,
    ) -> WebsiteBundle:
        def report(stage: GenerationStage, message: str, **details: Any) -> None:
            if on_progress is not None:
                on_progress(GenerationProgress(stage, message, **details))

        started = time.perf_counter()
        validate_request(request, self._catalog)
        report(GenerationStage.building_context, "Gathering business information")
        context = business_context or self._load_context(request)

        industry = classify(request.prompt, context, knowledge_base=self._knowledge_base)
        profile = self._knowledge_base.get_profile(industry)
        logger.info(
            "Starting website generation",
            extra={"generation_id": generation_id, "site_id": request.site_id, "industry": profile.id},
        )
        report(GenerationStage.analyzing_prompt, "Planning the site architecture")

        completed, architecture = await self._until_cancelled(
            self._planner.plan(request, context, profile), cancel_event
        )
        if not completed:
            raise GenerationCancelled("Generation cancelled before the site architecture was planned")

        assembly_context = AssemblyContext(
            business_context=context, profile=profile, preferences=request.preferences
        )
        pages, failed_pages, cancelled_pages = await self._assemble_pages(
            architecture, assembly_context, cancel_event, report
        )
        report(GenerationStage.generating_shared_elements, "Creating navigation and footer")
        nav, footer = await self._shared_elements(pages, architecture, context, cancel_event)

        report(
            GenerationStage.finalizing,
            "Finalizing website",
            pages_complete=len(pages),
            pages_total=len(architecture.pages),
        )

        build_time_ms = int((time.perf_counter() - started) * 1000)
        bundle = compose(
            architecture,
            pages,
            nav,
            footer,
            business_context=context,
            failed_pages=failed_pages,
            cancelled_pages=cancelled_pages,
            build_time_ms=build_time_ms,
        )
        logger.info(
            "Website generation finished",
            extra={
                "generation_id": generation_id,
                "pages": len(bundle.pages),
                "failed_pages": list(failed_pages),
                "cancelled_pages": list(cancelled_pages),
                "build_time_ms": build_time_ms,
            },
        )
        return bundle

    def _load_context(self, request: GenerationRequest) -> BusinessDataContext:
        if self._business_provider is None or not request.site_id:
            return BusinessDataContext()
        try:
            return self._business_provider.get(request.site_id)
        except (FileNotFoundError, KeyError) as exc:
            raise InvalidRequest([f"no business data for site_id {request.site_id}"]) from exc

    async def _until_cancelled(
        self,
        awaitable: Awaitable[Any],
        cancel_event: asyncio.Event | None,
    ) -> tuple[bool, Any]:
        """Await ``awaitable`` unless ``cancel_event`` fires first, which cancels it."""
        task = asyncio.ensure_future(awaitable)
        if cancel_event is None:
            return True, await task
        waiter = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
        if task.cancelled():
            return False, None
        return True, task.result()

    async def _assemble_pages(
        self,
        architecture: SiteArchitecture,
        assembly_context: AssemblyContext,
        cancel_event: asyncio.Event | None,
        report: Callable[..., None],
    ) -> tuple[list[GeneratedPage], list[str], list[str]]:
        semaphore = asyncio.Semaphore(self._settings.page_concurrency)
        total = len(architecture.pages)
        finished = 0
        report(GenerationStage.generating_pages, f"Generating {total} pages", pages_total=total)

        async def run(plan: PagePlan) -> GeneratedPage:
            async with semaphore:
                return await self._assembler.assemble(plan, architecture, assembly_context)

        tasks = {asyncio.create_task(run(plan), name=f"page-{plan.page_id}"): plan for plan in architecture.pages}
        waiter = asyncio.ensure_future(cancel_event.wait()) if cancel_event else None
        pending = set(tasks)
        try:
            while pending:
                watched = pending | {waiter} if waiter else pending
                done, _ = await asyncio.wait(watched, return_when=asyncio.FIRST_COMPLETED)
                pending -= done
                for task in done:
                    if task is waiter:
                        continue
                    finished += 1
                    plan = tasks[task]
                    report(
                        GenerationStage.generating_pages,
                        f"Finished {plan.name} page",
                        pages_complete=finished,
                        pages_total=total,
                        current_page=plan.page_id,
                    )
                if waiter is not None and waiter in done:
                    logger.info("Generation cancelled during page assembly", extra={"pending": len(pending)})
                    break
        finally:
            if waiter is not None:
                waiter.cancel()
            for task in pending:
                task.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        pages: list[GeneratedPage] = []
        failed: list[str] = []
        cancelled: list[str] = []
        for task, plan in tasks.items():
            if task.cancelled():
                cancelled.append(plan.page_id)
                continue
            error = task.exception()
            if error is None:
                pages.append(task.result())
            elif isinstance(error, PageAssemblyFailure):
                logger.error("Page assembly failed", extra={"page_id": plan.page_id, "error": str(error)})
                failed.append(plan.page_id)
            else:
                logger.error(
                    "Unexpected error assembling page",
                    exc_info=error,
                    extra={"page_id": plan.page_id},
                )
                failed.append(plan.page_id)
        return pages, failed, cancelled

    async def _shared_elements(
        self,
        pages: Sequence[GeneratedPage],
        architecture: SiteArchitecture,
        context: BusinessDataContext,
        cancel_event: asyncio.Event | None,
    ) -> tuple[GeneratedComponent, GeneratedComponent]:
        if cancel_event is None or not cancel_event.is_set():
            completed, shared = await self._until_cancelled(
                asyncio.gather(
                    self._shared.generate_nav(pages, architecture=architecture, business_context=context),
                    self._shared.generate_footer(context, architecture=architecture, pages=pages),
                ),
                cancel_event,
            )
            if completed:
                return shared[0], shared[1]
        return (
            self._shared.placeholder_nav(pages, architecture=architecture, business_context=context),
            self._shared.placeholder_footer(context, architecture=architecture, pages=pages),
        )


async def generate_website(
    request: GenerationRequest,
    *,
    service: GenerativeService,
    business_context: BusinessDataContext | None = None,
    catalog: ComponentCatalog = DEFAULT_CATALOG,
    settings: EngineSettings | None = None,
    cancel_event: asyncio.Event | None = None,
    on_progress: ProgressCallback | None = None,
) -> WebsiteBundle:
    engine = WebsiteDesignerEngine(service, catalog=catalog, settings=settings)
    return await engine.generate_website(
        request, business_context=business_context, cancel_event=cancel_event, on_progress=on_progress
    )


__all__ = ["WebsiteDesignerEngine", "generate_website", "validate_request"]
