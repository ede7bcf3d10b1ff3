"""Follow plans that are being generated until they settle."""

from __future__ import annotations

from django.core.management.base import BaseCommand, CommandError

from evaluations.models import Evaluation
from evaluations.models.choices import PlanStatus
from evaluations.services.plan_poller import PlanStatusPoller


class Command(BaseCommand):
    help = "Poll evaluations whose plan is generating and report when each one settles."

    def add_arguments(self, parser) -> None:
        parser.add_argument(
            "ids",
            nargs="*",
            type=int,
            help="Evaluation ids to follow. Defaults to every plan currently generating.",
        )
        parser.add_argument(
            "--interval",
            type=float,
            default=None,
            help="Seconds between polls (default: PLAN_STATUS_POLL_SECONDS).",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=600,
            help="Give up after this many seconds.",
        )

    def handle(self, *args, **options) -> None:
        ids = options["ids"] or list(
            Evaluation.objects.filter(plan_status=PlanStatus.GENERATING).values_list("id", flat=True)
        )

        def report(evaluation_id: int, status: str) -> None:
            self.stdout.write(self.style.SUCCESS(f"Evaluation {evaluation_id}: plan {status}."))

        poller = PlanStatusPoller(on_settled=report, interval=options["interval"])
        watched = poller.watch(ids)
        if not watched:
            self.stdout.write("No plans are being generated.")
            return

        self.stdout.write(f"Watching {len(watched)} plan(s) every {poller.interval:g}s...")
        try:
            finished = poller.wait(timeout=options["timeout"])
        except KeyboardInterrupt:
            poller.stop()
            raise CommandError("Interrupted.")
        if not finished:
            pending = sorted(poller.watched)
            poller.stop()
            raise CommandError(f"Timed out; still generating: {pending}.")
