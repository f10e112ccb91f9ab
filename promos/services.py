import logging

from django.db.models import F, Q

from .models import Promo

logger = logging.getLogger(__name__)


def redeem_promo(promo_id):
    """
    Counts one use of the promo. The cap is re-checked in the UPDATE itself
    so two orders racing for the last use cannot both succeed.
    """
    updated = Promo.objects.filter(
        Q(max_usage__isnull=True) | Q(used_count__lt=F('max_usage')),
        pk=promo_id,
    ).update(used_count=F('used_count') + 1)
    if updated:
        logger.info("Promo %s redeemed", promo_id)
    else:
        logger.info("Promo %s could not be redeemed: usage limit reached", promo_id)
    return bool(updated)
