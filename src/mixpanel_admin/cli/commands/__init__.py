"""CLI command groups for mixpanel_admin.

Command groups:
- orgs: Organizations visible to the service account
- project: Project read, create, update (delete is refused)
- timezones: Timezone reference list
"""
