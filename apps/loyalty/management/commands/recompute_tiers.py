from django.core.management.base import BaseCommand

from apps.common.models import Shop
from apps.loyalty.services import LoyaltyConfigService


class Command(BaseCommand):
    help = 'Recompute customer tiers from lifetime points and the current thresholds'

    def add_arguments(self, parser):
        parser.add_argument(
            '--shop-id',
            type=int,
            help='Recompute tiers for a specific shop ID only',
        )

    def handle(self, *args, **options):
        shop_id = options.get('shop_id')

        if shop_id is not None:
            shops = Shop.objects.filter(id=shop_id, is_active=True)
            if not shops.exists():
                self.stdout.write(self.style.ERROR(f'Shop with ID {shop_id} not found'))
                return
        else:
            shops = Shop.objects.filter(is_active=True)
            self.stdout.write('Recomputing customer tiers for all shops...')

        total_changed = 0
        for shop in shops:
            changed = LoyaltyConfigService.recompute_customer_tiers(shop)
            total_changed += changed
            self.stdout.write(f'{shop.name}: {changed} tier(s) changed')

        self.stdout.write(
            self.style.SUCCESS(f'Tier recomputation complete. Total changed: {total_changed}')
        )
