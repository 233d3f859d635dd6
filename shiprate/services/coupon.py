"""Applied coupon code as part of the cacheable cart state."""

from typing import Optional

from shiprate.models import RateRequest


class CouponReader:
    """Reads the discount code currently applied to the cart."""

    def get_coupon_code(self, request: Optional[RateRequest]) -> Optional[str]:
        if request is None or request.coupon_code is None:
            return None
        code = request.coupon_code.strip()
        return code or None


coupon_reader = CouponReader()
