# -*- coding: utf-8 -*-
# services/imposition_service.py
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from imposer.config import ImpositionConfig
from imposer.exceptions import ImpositionError
from imposer.imposition_app import compute_imposition
from imposer.models import ImpositionResult

logger = logging.getLogger(__name__)


@dataclass
class ImpositionJob:
    document_key: str
    generation: int
    config: ImpositionConfig
    done: threading.Event = field(default_factory=threading.Event)
    result: Optional[ImpositionResult] = None
    error: Optional[Exception] = None
    stale: bool = False


class ImpositionService:
    """Фоновый расчёт импозиции: последний запрос по документу побеждает.

    Каждый новый запрос для документа получает следующий номер поколения.
    Расчёт не прерывается; результат устаревшего поколения просто отбрасывается.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._generations: Dict[str, int] = {}
        self._latest: Dict[str, ImpositionJob] = {}

    def submit(self, document_key: str, config: ImpositionConfig, source,
               on_complete: Optional[Callable[[ImpositionJob], None]] = None) -> ImpositionJob:
        with self._lock:
            generation = self._generations.get(document_key, 0) + 1
            self._generations[document_key] = generation

        job = ImpositionJob(document_key, generation, config)
        thread = threading.Thread(target=self._run, args=(job, source, on_complete))
        thread.daemon = True
        thread.start()
        logger.debug(f"Запущен расчёт {document_key} (поколение {generation})")
        return job

    def _run(self, job: ImpositionJob, source, on_complete):
        try:
            try:
                job.result = compute_imposition(job.config, source)
            except ImpositionError as e:
                logger.warning(f"Ошибка расчёта {job.document_key}: {e}")
                job.error = e
            except Exception as e:
                logger.exception(f"Сбой фонового расчёта {job.document_key}: {e}")
                job.error = e

            with self._lock:
                if self._generations.get(job.document_key) != job.generation:
                    job.stale = True
                else:
                    self._latest[job.document_key] = job

            if job.stale:
                logger.debug(f"Отброшен устаревший результат {job.document_key} "
                             f"(поколение {job.generation})")
            elif on_complete is not None:
                on_complete(job)
        finally:
            job.done.set()

    def latest(self, document_key: str) -> Optional[ImpositionJob]:
        with self._lock:
            return self._latest.get(document_key)

    def forget(self, document_key: str):
        with self._lock:
            self._generations.pop(document_key, None)
            self._latest.pop(document_key, None)
