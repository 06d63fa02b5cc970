# ── Bookings ──────────────────────────────────────────────────
from rapidwaste.routes.booking_router import router as booking_router

# ── Drivers & users ───────────────────────────────────────────
from rapidwaste.routes.driver_router import router as driver_router
from rapidwaste.routes.user_router import router as user_router

# ── Payments & live updates ───────────────────────────────────
from rapidwaste.routes.payment_router import router as payment_router
from rapidwaste.routes.notification_router import router as notification_router
