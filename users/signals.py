# users/signals.py
import logging

from django.dispatch import receiver
from djoser.signals import user_registered

logger = logging.getLogger(__name__)


@receiver(user_registered)
def log_user_registered(sender, user, request, **kwargs):
    logger.info("User %s registered (%s)", user.pk, user.email)
