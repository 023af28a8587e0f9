# constants.py

BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "AB-", "O+", "O-"]

ROLES = {
    "admin": "Administrator - full access to users, requests, blogs and statistics",
    "volunteer": "Volunteer - moderates donation requests and writes blog posts",
    "donor": "Donor - creates and confirms donation requests",
}

# role sets used by the authorization layer
ADMIN_ONLY = ("admin",)
STAFF_ROLES = ("admin", "volunteer")
