from models.base import Base

from models.user import User
from models.donation_request import DonationRequest

from models.blog import Blog
from models.funding import Funding
