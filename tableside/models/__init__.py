from tableside.models.table import Table
from tableside.models.floor_plan import FloorPlan
from tableside.models.table_placement import TablePlacement, TableShape
from tableside.models.menu_item import MenuItem
from tableside.models.order import Order, OrderStatus, ORDER_SEQUENCE, next_status
from tableside.models.order_line import OrderLine
from tableside.models.payment import Payment, PaymentStatus
