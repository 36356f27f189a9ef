"""
Plan services - business rules for the plan catalogue.
"""
import logging
import re

from django.db import transaction
from django.db.models import ProtectedError, Q

from core.audit import actor_display, log_action
from core.exceptions import AppError
from .models import Plan

logger = logging.getLogger(__name__)

SEARCHABLE_FIELDS = ('name', 'description', 'slug')


def make_slug(value):
    """'Pro Plan (2025)' -> 'pro-plan-2025'"""
    slug = value.lower().strip()
    slug = re.sub(r'[^a-z0-9\s-]', '', slug)
    slug = re.sub(r'\s+', '-', slug)
    return re.sub(r'-+', '-', slug)


def ensure_post_trial_plan(post_trial_plan_id, current_plan_id=None):
    """
    Validate the plan a trial converts into. Returns the Plan or None.
    """
    if not post_trial_plan_id:
        return None
    if current_plan_id is not None and int(post_trial_plan_id) == int(current_plan_id):
        raise AppError(400, 'Post Trial Plan cannot reference the same plan')
    target = Plan.objects.filter(pk=post_trial_plan_id).only('id', 'is_trial').first()
    if target is None:
        raise AppError(400, 'Post Trial Plan does not reference an existing plan')
    if target.is_trial:
        raise AppError(400, 'Post Trial Plan cannot reference another trial plan')
    return target


def _ensure_slug_free(slug, exclude_pk=None):
    if not slug:
        raise AppError(400, 'Slug could not be derived from name', 'invalid_slug')
    qs = Plan.objects.filter(slug=slug)
    if exclude_pk is not None:
        qs = qs.exclude(pk=exclude_pk)
    if qs.exists():
        raise AppError(409, f"Plan slug '{slug}' already exists", 'slug_taken')


@transaction.atomic
def create_plan(data, actor=None):
    data = dict(data)
    is_trial = bool(data.get('is_trial', False))
    post_trial_id = data.pop('post_trial_plan_id', None)
    data['post_trial_plan'] = ensure_post_trial_plan(post_trial_id if is_trial else None)
    data['slug'] = (data.get('slug') or '').strip() or make_slug(data['name'])
    _ensure_slug_free(data['slug'])
    data['is_trial'] = is_trial
    data.setdefault('features', [])

    plan = Plan.objects.create(**data)
    logger.info('Plan created: id=%s slug=%s', plan.pk, plan.slug)
    log_action(
        'Plan Created',
        f"Plan created: Name='{plan.name}' by {actor_display(actor)}",
        actor=actor,
    )
    return plan


def list_plans(params):
    qs = Plan.objects.select_related('post_trial_plan')
    if params.get('activeOnly') == 'true':
        qs = qs.filter(is_active=True)
    search = (params.get('search') or '').strip()
    if search:
        query = Q()
        for field in SEARCHABLE_FIELDS:
            query |= Q(**{f'{field}__icontains': search})
        qs = qs.filter(query)
    return qs.order_by('serial', 'id')


def get_plan(pk):
    plan = Plan.objects.select_related('post_trial_plan').filter(pk=pk).first()
    if plan is None:
        raise AppError(404, 'Plan not found')
    return plan


def get_plan_by_slug(slug):
    plan = Plan.objects.select_related('post_trial_plan').filter(slug=slug).first()
    if plan is None:
        raise AppError(404, 'Plan not found')
    return plan


@transaction.atomic
def update_plan(pk, patch, actor=None):
    """
    Partial update. A changed name refreshes the slug unless one is given.
    """
    patch = dict(patch)
    plan = Plan.objects.select_for_update().filter(pk=pk).first()
    if plan is None:
        raise AppError(404, 'Plan not found')

    if not patch.get('slug') and patch.get('name'):
        patch['slug'] = make_slug(patch['name'])
    if patch.get('slug'):
        _ensure_slug_free(patch['slug'], exclude_pk=plan.pk)

    will_be_trial = patch.pop('is_trial', plan.is_trial)
    if 'post_trial_plan_id' in patch:
        target_id = patch.pop('post_trial_plan_id')
    else:
        target_id = plan.post_trial_plan_id
    plan.is_trial = will_be_trial
    plan.post_trial_plan = (
        ensure_post_trial_plan(target_id, current_plan_id=plan.pk) if will_be_trial else None
    )

    for field, value in patch.items():
        setattr(plan, field, value)
    plan.save()

    fields = ', '.join(sorted(patch))
    log_action(
        'Plan Updated',
        f"Plan updated: Name='{plan.name}' fields=[{fields}] by {actor_display(actor)}",
        actor=actor,
    )
    return plan


def delete_plan(pk, actor=None):
    plan = get_plan(pk)
    name = plan.name
    try:
        plan.delete()
    except ProtectedError:
        raise AppError(409, 'Plan is assigned to one or more organizations', 'plan_in_use')
    logger.info('Plan deleted: id=%s', pk)
    log_action(
        'Plan Removed',
        f"Plan Removed: Name='{name}' by {actor_display(actor)}",
        actor=actor,
    )
    return plan
