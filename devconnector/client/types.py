SET_ALERT = "SET_ALERT"
REMOVE_ALERT = "REMOVE_ALERT"

REGISTER_SUCCESS = "REGISTER_SUCCESS"
REGISTER_FAIL = "REGISTER_FAIL"
USER_LOADED = "USER_LOADED"
AUTH_ERROR = "AUTH_ERROR"
LOGIN_SUCCESS = "LOGIN_SUCCESS"
LOGIN_FAIL = "LOGIN_FAIL"
LOGOUT = "LOGOUT"
ACCOUNT_DELETED = "ACCOUNT_DELETED"

GET_PROFILE = "GET_PROFILE"
GET_PROFILES = "GET_PROFILES"
UPDATE_PROFILE = "UPDATE_PROFILE"
CLEAR_PROFILE = "CLEAR_PROFILE"
PROFILE_ERROR = "PROFILE_ERROR"

GET_POSTS = "GET_POSTS"
GET_POST = "GET_POST"
ADD_POST = "ADD_POST"
DELETE_POST = "DELETE_POST"
POST_ERROR = "POST_ERROR"
UPDATE_LIKES = "UPDATE_LIKES"
ADD_COMMENT = "ADD_COMMENT"
REMOVE_COMMENT = "REMOVE_COMMENT"
