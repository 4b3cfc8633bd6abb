"""
Scheduler del refresco periodico de cartas.

Usa un AsyncIOScheduler de APScheduler sobre el event loop de la aplicacion:
- Al arrancar dispara un ciclo inmediato (sin bloquear el startup).
- Luego repite cada REFRESH_INTERVAL_HOURS (por defecto 7 dias).
- `stop()` desarma el timer; un ciclo en curso no se cancela y termina solo.

El job tiene `max_instances=1`: si un ciclo se alarga mas que el intervalo, el
disparo siguiente se descarta en lugar de solaparse.
"""
from __future__ import annotations

from datetime import timedelta, timezone
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from index_duel.application.services.card_refresh_pipeline import CardRefreshPipeline
from index_duel.shared.constants.card_constants import DEFAULT_REFRESH_INTERVAL_HOURS, SchedulerState
from index_duel.shared.utils.datetime_utils import utc_now


REFRESH_JOB_ID = "card_refresh"


class RefreshScheduler:
    """
    Maquina de estados idle -> running -> waiting -> running -> ... -> stopped.
    """

    def __init__(
        self,
        pipeline: CardRefreshPipeline,
        *,
        interval: timedelta = timedelta(hours=DEFAULT_REFRESH_INTERVAL_HOURS),
        run_on_start: bool = True,
        scheduler: Optional[AsyncIOScheduler] = None,
    ) -> None:
        self._pipeline = pipeline
        self._interval = interval
        self._run_on_start = run_on_start
        self._scheduler = scheduler or AsyncIOScheduler(timezone=timezone.utc)
        self._state = SchedulerState.IDLE
        self._cycles_started = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def cycles_started(self) -> int:
        return self._cycles_started

    def start(self) -> None:
        """Arma el job periodico y, si corresponde, dispara el ciclo inicial."""
        if self._state is not SchedulerState.IDLE:
            logger.warning(f"Scheduler de refresco ya iniciado (estado: {self._state.value})")
            return

        job_kwargs = {}
        if self._run_on_start:
            # Primera ejecucion inmediata; las siguientes segun el intervalo
            job_kwargs["next_run_time"] = utc_now()

        self._scheduler.add_job(
            self._run_cycle,
            trigger=IntervalTrigger(seconds=self._interval.total_seconds(), timezone=timezone.utc),
            id=REFRESH_JOB_ID,
            name="Refresco periodico del catalogo de cartas",
            max_instances=1,
            coalesce=True,
            misfire_grace_time=None,
            replace_existing=True,
            **job_kwargs,
        )
        self._scheduler.start()
        self._state = SchedulerState.WAITING
        logger.info(f"Scheduler de refresco iniciado (intervalo: {self._interval})")

    async def _run_cycle(self) -> None:
        """Job programado: un ciclo de refresco. Nunca propaga errores al scheduler."""
        if self._state is SchedulerState.STOPPED:
            return
        if self._pipeline.is_running:
            # Un refresco manual tiene el lock; este disparo se descarta
            logger.warning("Disparo programado omitido: ya hay un ciclo de refresco en curso")
            return

        self._cycles_started += 1
        trigger = "inicial" if self._cycles_started == 1 and self._run_on_start else "periodico"
        self._state = SchedulerState.RUNNING
        try:
            await self._pipeline.run_safely(trigger)
        finally:
            if self._state is not SchedulerState.STOPPED:
                self._state = SchedulerState.WAITING

    def stop(self) -> None:
        """Desarma el timer. No interrumpe un ciclo en curso."""
        if self._state is SchedulerState.STOPPED:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._state = SchedulerState.STOPPED
        logger.info("Scheduler de refresco detenido")
