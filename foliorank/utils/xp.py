from foliorank.constants import XPConstants

class XPScorer:
    """Handles XP award calculations for submitted reviews"""
    
    @staticmethod
    def score_side(feedback: str) -> int:
        """
        Calculate the XP earned by one side's written feedback
        
        Args:
            feedback: Feedback text for one portfolio
            
        Returns:
            XP for this side, based only on the trimmed length
        """
        length = len((feedback or "").strip())
        for lower_bound, award in XPConstants.FEEDBACK_TIERS:
            if length > lower_bound:
                return award
        return 0
    
    @staticmethod
    def score(feedback_left: str, feedback_right: str) -> int:
        """
        Calculate the total XP award for a completed review
        
        Args:
            feedback_left: Feedback for the left portfolio
            feedback_right: Feedback for the right portfolio
            
        Returns:
            Both side awards plus the completion bonus
        """
        return (
            XPScorer.score_side(feedback_left)
            + XPScorer.score_side(feedback_right)
            + XPConstants.COMPLETION_BONUS
        )
