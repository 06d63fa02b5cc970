# Import all CRUD modules for easier access
from rapidwaste.crud.user import user_crud
from rapidwaste.crud.driver import driver_crud
from rapidwaste.crud.booking import booking_crud
from rapidwaste.crud.sequence import sequence_crud
