"""Business rules shared by the public site and the back office"""
