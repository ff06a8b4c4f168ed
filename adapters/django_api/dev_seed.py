"""
EastGate Django Adapter — Development Seed
============================================
Demo data for local runs: the four branches, a slice of Kigali Main
operations, one Ngoma room block, and the seeded staff accounts the
front office has always shared for testing.

Passwords here are the well-known demo passwords. They are hashed on
load and never stored in plain text.
"""

from __future__ import annotations

from core.bootstrap.seed import SeedBundle
from core.context.scope import BRANCH_WILDCARD
from core.store.models import EntityKind

DEV_MAIN_BRANCH_ID = "br-001"
DEV_NGOMA_BRANCH_ID = "br-002"

BRANCHES = (
    {
        "id": "br-001",
        "name": "Kigali Main",
        "location": "KG 7 Ave, Kigali City",
        "manager_name": "Jean-Pierre Habimana",
        "total_rooms": 120,
        "occupancy_rate": 78,
    },
    {
        "id": "br-002",
        "name": "Ngoma Branch",
        "location": "Ngoma District, Eastern Province",
        "manager_name": "Diane Uwimana",
        "total_rooms": 80,
        "occupancy_rate": 72,
    },
    {
        "id": "br-003",
        "name": "Kirehe Branch",
        "location": "Kirehe District, Eastern Province",
        "manager_name": "Patrick Niyonsaba",
        "total_rooms": 65,
        "occupancy_rate": 68,
    },
    {
        "id": "br-004",
        "name": "Gatsibo Branch",
        "location": "Gatsibo District, Eastern Province",
        "manager_name": "Emmanuel Mugisha",
        "total_rooms": 75,
        "occupancy_rate": 75,
    },
)


def _room(room_id, branch_id, number, floor, room_type, status, price, guest=None):
    return {
        "id": room_id,
        "branch_id": branch_id,
        "number": number,
        "floor": floor,
        "room_type": room_type,
        "status": status,
        "price": price,
        "current_guest": guest,
    }


ROOMS = (
    _room("rm-101", "br-001", "101", 1, "deluxe", "occupied", 250, "Sarah Mitchell"),
    _room("rm-102", "br-001", "102", 1, "deluxe", "available", 250),
    _room("rm-103", "br-001", "103", 1, "standard", "cleaning", 180),
    _room("rm-104", "br-001", "104", 1, "standard", "available", 180),
    _room("rm-105", "br-001", "105", 1, "family", "reserved", 320),
    _room("rm-201", "br-001", "201", 2, "executive", "occupied", 450, "James Okafor"),
    _room("rm-202", "br-001", "202", 2, "executive", "available", 450),
    _room("rm-203", "br-001", "203", 2, "deluxe", "maintenance", 250),
    _room("rm-301", "br-001", "301", 3, "presidential", "occupied", 850, "Victoria Laurent"),
    _room("rm-302", "br-001", "302", 3, "presidential", "reserved", 850),
    _room("rm-n101", "br-002", "101", 1, "standard", "available", 150),
    _room("rm-n102", "br-002", "102", 1, "deluxe", "available", 220),
)

GUESTS = (
    {
        "id": "g-001",
        "name": "Sarah Mitchell",
        "email": "sarah@email.com",
        "phone": "+1 555-0101",
        "nationality": "United States",
        "branch_id": "br-001",
        "loyalty_tier": "platinum",
        "loyalty_points": 15200,
        "total_stays": 12,
        "total_spent": 28500,
        "last_visit": "2026-02-10",
    },
    {
        "id": "g-002",
        "name": "James Okafor",
        "email": "james@email.com",
        "phone": "+234 802-0202",
        "nationality": "Nigeria",
        "branch_id": "br-001",
        "loyalty_tier": "gold",
        "loyalty_points": 8400,
        "total_stays": 7,
        "total_spent": 14200,
        "last_visit": "2026-02-11",
    },
    {
        "id": "g-007",
        "name": "Kwame Asante",
        "email": "kwame@email.com",
        "phone": "+233 24-0707",
        "nationality": "Ghana",
        "branch_id": "br-001",
        "loyalty_points": 850,
        "total_stays": 1,
        "total_spent": 1350,
        "last_visit": "2025-12-15",
    },
    {
        "id": "g-101",
        "name": "Aline Uwera",
        "email": "aline@email.com",
        "phone": "+250 788-1101",
        "nationality": "Rwanda",
        "branch_id": "br-002",
    },
)


def _staff(staff_id, branch_id, name, email, role, department, shift, join_date):
    return {
        "id": staff_id,
        "branch_id": branch_id,
        "name": name,
        "email": email,
        "role": role,
        "department": department,
        "shift": shift,
        "join_date": join_date,
    }


STAFF = (
    _staff("s-001", "br-001", "Jean-Pierre Habimana", "jp@eastgate.rw",
           "branch_manager", "management", "Day", "2022-03-15"),
    _staff("s-002", "br-001", "Grace Uwase", "grace@eastgate.rw",
           "receptionist", "front_desk", "Morning", "2023-01-10"),
    _staff("s-004", "br-001", "Claudine Mukamana", "claudine@eastgate.rw",
           "housekeeping", "housekeeping", "Morning", "2022-08-20"),
    _staff("s-005", "br-001", "Patrick Bizimana", "patrick@eastgate.rw",
           "waiter", "restaurant", "Split", "2023-02-15"),
    _staff("s-006", "br-001", "Aimée Kamikazi", "aimee@eastgate.rw",
           "accountant", "finance", "Day", "2022-05-01"),
    _staff("s-201", "br-002", "Diane Uwimana", "diane@eastgate.rw",
           "branch_manager", "management", "Day", "2022-04-01"),
)

BOOKINGS = (
    {
        "id": "BK-2024001",
        "branch_id": "br-001",
        "guest_id": "g-001",
        "guest_name": "Sarah Mitchell",
        "guest_email": "sarah@email.com",
        "room_number": "101",
        "room_type": "deluxe",
        "check_in": "2026-02-10",
        "check_out": "2026-02-14",
        "status": "checked_in",
        "total_amount": 1000,
        "payment_method": "visa",
        "add_ons": ["Airport Pickup", "Breakfast"],
    },
    {
        "id": "BK-2024002",
        "branch_id": "br-001",
        "guest_id": "g-002",
        "guest_name": "James Okafor",
        "guest_email": "james@email.com",
        "room_number": "201",
        "room_type": "executive",
        "check_in": "2026-02-11",
        "check_out": "2026-02-15",
        "status": "checked_in",
        "total_amount": 1800,
        "payment_method": "mastercard",
        "add_ons": ["Spa Package", "Extra Bed"],
    },
    {
        "id": "BK-2024007",
        "branch_id": "br-001",
        "guest_id": "g-007",
        "guest_name": "Kwame Asante",
        "guest_email": "kwame@email.com",
        "room_number": "202",
        "room_type": "executive",
        "check_in": "2026-02-16",
        "check_out": "2026-02-19",
        "status": "pending",
        "total_amount": 1350,
        "payment_method": "airtel_money",
    },
    {
        "id": "BK-2024101",
        "branch_id": "br-002",
        "guest_id": "g-101",
        "guest_name": "Aline Uwera",
        "guest_email": "aline@email.com",
        "room_number": "102",
        "room_type": "deluxe",
        "check_in": "2026-02-18",
        "check_out": "2026-02-20",
        "status": "confirmed",
        "total_amount": 440,
        "payment_method": "mtn_mobile",
    },
)

MENU_ITEMS = (
    {"id": "mi-001", "name": "Continental Breakfast", "category": "Breakfast", "price": 15,
     "description": "Eggs, toast, fresh fruit, pastries, juice"},
    {"id": "mi-003", "name": "Grilled Tilapia", "category": "Main Course", "price": 18,
     "description": "Lake Kivu tilapia with vegetables and rice", "popular": True},
    {"id": "mi-005", "name": "Isombe & Plantain", "category": "Main Course", "price": 14,
     "description": "Traditional cassava leaves with plantain", "vegetarian": True},
    {"id": "mi-007", "name": "Rwandan Coffee", "category": "Beverages", "price": 5,
     "description": "Premium single-origin Rwandan coffee", "popular": True},
)

TABLES = (
    {"id": "t-001", "branch_id": "br-001", "number": 1, "seats": 4},
    {"id": "t-005", "branch_id": "br-001", "number": 5, "seats": 2, "status": "occupied",
     "current_order": "ORD-001", "waiter": "Patrick Bizimana", "guest_name": "Sarah Mitchell"},
    {"id": "t-201", "branch_id": "br-002", "number": 1, "seats": 4},
)

ORDERS = (
    {
        "id": "ORD-001",
        "branch_id": "br-001",
        "table_number": 5,
        "items": [
            {"name": "Grilled Tilapia", "quantity": 2, "price": 18},
            {"name": "Rwandan Coffee", "quantity": 2, "price": 5},
        ],
        "status": "preparing",
        "total": 46,
        "guest_name": "Sarah Mitchell",
        "room_charge": True,
        "created_at": "2026-02-12T12:30:00",
    },
)

EVENTS = (
    {
        "id": "ev-001",
        "branch_id": "br-001",
        "name": "Kigali Tech Summit",
        "event_type": "conference",
        "date": "2026-02-20",
        "start_time": "09:00",
        "end_time": "17:00",
        "hall": "Grand Ballroom",
        "capacity": 500,
        "attendees": 380,
        "total_amount": 45000,
        "organizer": "TechRwanda Ltd",
    },
)

SERVICE_REQUESTS = (
    {
        "id": "sr-001",
        "branch_id": "br-001",
        "guest_name": "James Okafor",
        "room_number": "201",
        "request_type": "housekeeping",
        "description": "Extra towels",
        "priority": "low",
    },
)

NOTIFICATIONS = (
    {
        "id": "n-001",
        "branch_id": "br-001",
        "title": "VIP arrival",
        "message": "Presidential suite guest arriving at 15:00",
        "notification_type": "booking",
    },
    {
        "id": "n-201",
        "branch_id": "br-002",
        "title": "Maintenance",
        "message": "Generator service on Friday",
        "notification_type": "alert",
    },
)

# Seeded identities share ids with their HR records where one exists.
ACCOUNTS = (
    {"id": "u-admin", "email": "admin@eastgate.rw", "password": "admin123",
     "role": "super_admin", "branch_id": BRANCH_WILDCARD, "name": "EastGate Admin"},
    {"id": "u-manager", "email": "manager@eastgate.rw", "password": "manager123",
     "role": "super_manager", "branch_id": BRANCH_WILDCARD, "name": "EastGate Manager"},
    {"id": "s-001", "email": "jp@eastgate.rw", "password": "jp123",
     "role": "branch_manager", "branch_id": "br-001", "name": "Jean-Pierre Habimana"},
    {"id": "s-002", "email": "grace@eastgate.rw", "password": "grace123",
     "role": "receptionist", "branch_id": "br-001", "name": "Grace Uwase"},
    {"id": "s-005", "email": "patrick@eastgate.rw", "password": "patrick123",
     "role": "waiter", "branch_id": "br-001", "name": "Patrick Bizimana"},
    {"id": "s-201", "email": "diane@eastgate.rw", "password": "diane123",
     "role": "branch_manager", "branch_id": "br-002", "name": "Diane Uwimana"},
)


def dev_seed_bundle() -> SeedBundle:
    return SeedBundle(
        collections={
            EntityKind.BRANCH: BRANCHES,
            EntityKind.ROOM: ROOMS,
            EntityKind.GUEST: GUESTS,
            EntityKind.STAFF: STAFF,
            EntityKind.BOOKING: BOOKINGS,
            EntityKind.MENU_ITEM: MENU_ITEMS,
            EntityKind.TABLE: TABLES,
            EntityKind.ORDER: ORDERS,
            EntityKind.EVENT: EVENTS,
            EntityKind.SERVICE_REQUEST: SERVICE_REQUESTS,
            EntityKind.NOTIFICATION: NOTIFICATIONS,
        },
        accounts=ACCOUNTS,
    )
