"""
Example resource: a `users` table served by a default controller and by a
controller whose handlers are customized with mix().
"""
