"""CSS selectors and URLs for the professional network site.

These are integration details and change whenever the site's markup does.
"""

from typing import Final


class LinkedinUrls:
    """Site URLs used by the page actions."""

    BASE: Final[str] = "https://www.linkedin.com"
    CONNECTIONS: Final[str] = "https://www.linkedin.com/mynetwork/invite-connect/connections/"
    DATA_EXPORT: Final[str] = "https://www.linkedin.com/mypreferences/d/download-my-data"
    COMPANY_PEOPLE: Final[str] = "https://www.linkedin.com/company/{company}/people/"
    MESSAGES_GRAPHQL: Final[str] = "/voyager/api/voyagerMessagingGraphQL/graphql"
    MESSAGES_QUERY: Final[str] = "queryId=messengerMessages."


class LinkedinSelectors:
    """Selectors grouped by page."""

    # Profile page
    PROFILE_NAME: Final[str] = "h1.inline.t-24.v-align-middle.break-words"
    MORE_ACTIONS_BUTTON: Final[str] = 'button[aria-label="More actions"]'
    MORE_ACTIONS_DROPDOWN: Final[str] = "div.artdeco-dropdown__content-inner"
    DROPDOWN_TRIGGER: Final[str] = "button.artdeco-dropdown__trigger"
    DROPDOWN_CONNECT_ITEM: Final[str] = (
        ".artdeco-dropdown__item span.display-flex:text-is('Connect')"
    )
    PROFILE_ACTION: Final[str] = "button.pvs-profile-actions__action"
    PROFILE_ACTION_LABEL: Final[str] = "span.artdeco-button__text"
    PENDING_BUTTON: Final[str] = (
        "button.artdeco-button.artdeco-button--muted.artdeco-button--2"
        ".artdeco-button--secondary.pvs-profile-actions__action"
    )
    SECONDARY_ACTION_BUTTON: Final[str] = (
        "button.artdeco-button.artdeco-button--2.artdeco-button--secondary"
        ".pvs-profile-actions__action"
    )

    # Invite modal
    INVITE_MODAL: Final[str] = "div.send-invite"
    ADD_NOTE_BUTTON: Final[str] = "div.send-invite button.artdeco-button--secondary"
    NOTE_INPUT: Final[str] = "div.send-invite textarea#custom-message"
    SEND_INVITE_BUTTON: Final[str] = (
        'div.send-invite button.artdeco-button--primary[aria-label="Send invitation"]'
    )
    SEND_WITHOUT_NOTE_BUTTON: Final[str] = (
        'div.send-invite button.artdeco-button--primary[aria-label="Send without a note"]'
    )

    # Messaging
    MESSAGE_BUTTON: Final[str] = 'button.pvs-profile-actions__action[aria-label*="Message"]'
    MESSAGE_INPUT: Final[str] = "div.msg-form__contenteditable"
    MESSAGE_SEND_BUTTON: Final[str] = "button.msg-form__send-button"
    ACTIVE_CHAT_BUBBLE_HEADER: Final[str] = (
        "div.msg-overlay-conversation-bubble--is-active "
        "div.msg-overlay-bubble-header__badge-container"
    )

    # Recent activity
    NO_POSTS_TEXT: Final[str] = "text=hasn't posted yet"
    POSTS_LIST: Final[str] = "ul.display-flex.flex-wrap.list-style-none.justify-space-between"
    POST_LINKS: Final[str] = (
        "ul.display-flex.flex-wrap.list-style-none.justify-space-between li .app-aware-link"
    )

    # Connections page
    CONNECTIONS_HEADER: Final[str] = "header.mn-connections__header"
    CONNECTION_CARD_LINK: Final[str] = "a.mn-connection-card__link"
    SHOW_MORE_RESULTS: Final[str] = "button.scaffold-finite-scroll__load-button"

    # Company people page
    COMPANY_PEOPLE_TOTAL: Final[str] = "h2.text-heading-xlarge"
    COMPANY_SHOW_MORE: Final[str] = 'button:has-text("Show more results")'
    COMPANY_PROFILE_LINK: Final[str] = 'a.app-aware-link[aria-label*="View"][href*="/in/"]'

    # Data export page
    SETTINGS_IFRAME: Final[str] = ".settings-iframe--frame"
    DOWNLOAD_BUTTON: Final[str] = "button.download-btn"
    FAST_FILE_LABEL: Final[str] = 'label[for="fast-file-only"]'
    CONNECTIONS_FILE_LABEL: Final[str] = 'label[for="file_group_CONNECTIONS"]'
    REQUEST_ARCHIVE_BUTTON: Final[str] = "button#download-button"

    @staticmethod
    def connect_button(profile_name: str) -> str:
        """Primary connect control for the named profile."""
        return f'button[aria-label="Invite {profile_name} to connect"]'

    @staticmethod
    def connect_menu_item(profile_name: str) -> str:
        """Connect entry inside the "More actions" dropdown."""
        return f'div[aria-label="Invite {profile_name} to connect"]'
