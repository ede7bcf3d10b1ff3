from celery import shared_task

from evaluations.services.plan_generation import notify_plan_generation


@shared_task(name="evaluations.notify_plan_generation")
def notify_plan_generation_task(evaluation_id: int, force: bool = False) -> bool:
    return notify_plan_generation(evaluation_id, force=force)
